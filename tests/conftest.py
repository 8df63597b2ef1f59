import os

# Settings are frozen at first import; fix the test environment before any test module loads resumeos.
os.environ["ANALYTICS_ENABLED"] = "0"
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ["API_KEY"] = ""
