# config/scanner_config.py

SCANNER_CONFIG = {
    "safe_browsing": {
        "name": "safe_browsing",
        "api_endpoint": "https://safebrowsing.googleapis.com/v4/threatMatches:find",
        "client_id": "secure-inbox-extension",
        "client_version": "1.0",
        "threat_types": ["MALWARE", "SOCIAL_ENGINEERING", "UNWANTED_SOFTWARE"],
        "platform_types": ["ANY_PLATFORM"],
        "threat_entry_types": ["URL"],
    },
    "virustotal": {
        "name": "virustotal",
        "api_endpoint": "https://www.virustotal.com/api/v3",
        "poll_delay": 3,  # seconds between submission and report retrieval
    },
    "cache": {
        "ttl_seconds": 30 * 60,
    },
    "requests": {
        "timeout": 10,
    },
    "statistics": {
        "history_limit": 100,
        "recent_threats": 5,
    },
}
