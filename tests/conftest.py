import os

# Keep tests deterministic: no AI gateway, no scraping token, no rate limits.
os.environ["TOOLS_LLM_ENABLED"] = "0"
os.environ["TOOLS_STRICT_LLM"] = "0"
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ["API_KEY"] = ""
os.environ["APIFY_API_TOKEN"] = ""
os.environ["APIFY_API_KEY"] = ""
os.environ["APIFY_POLL_INTERVAL_S"] = "0"
