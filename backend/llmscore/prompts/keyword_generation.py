"""Prompts for generating search keywords a site should rank for."""

CONTENT_KEYWORD_PROMPT = """Based on the following website content, generate 10 relevant search keywords or phrases that users might use to find this website. Analyze the content to understand what the site offers, its main topics, and services.

Website Content:
{content}

Consider:
1. Main topics and services mentioned in the content
2. Key features and offerings
3. Industry-specific terms
4. Problem-solving keywords
5. Brand/product specific terms

Return only a comma-separated list of keywords, no explanations. Example: "web scraping, data extraction, api tools, crawler service, content parsing\""""

DOMAIN_KEYWORD_PROMPT = """Based on the website {domain}, generate 10 relevant search keywords or phrases that users might use to find this website. Consider:

1. The website's domain name and branding
2. Common industry terms related to the domain
3. Popular search queries for similar websites
4. Long-tail keywords that are specific to the site

Return only a comma-separated list of keywords, no explanations. Example: "web scraping, data extraction, api tools, crawler service, content parsing\""""
