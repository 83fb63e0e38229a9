# config.py - run settings, overridable from the environment

import os

DEVELOPMENT_APPLICATIONS_URL = os.environ.get(
    "DEVAPP_REGISTER_URL", "https://www.mountbarker.sa.gov.au/developmentregister"
)
COMMENT_URL = "mailto:council@mountbarker.sa.gov.au"

DATABASE_PATH = os.environ.get("DEVAPP_DATABASE", "data.sqlite")

# Proxy supplied by the hosting platform, if any
PROXY_URL = os.environ.get("MORPH_PROXY") or None

# Links to the register documents on the listing page
PDF_LINK_SELECTOR = "td.uContentListDesc a[href$='.pdf']"

REQUEST_TIMEOUT = 60  # seconds

# Pause between fetches: base plus a random whole number of seconds in [0, DELAY_RANDOM_SECONDS)
DELAY_BASE_SECONDS = 2
DELAY_RANDOM_SECONDS = 5

# The most recent document plus randomly chosen others; more than this risks
# running out of memory on the hosting platform
MAX_DOCUMENTS = 2

# Threads used to extract the pages of one document with the anchor strategy
PAGE_WORKERS = int(os.environ.get("DEVAPP_PAGE_WORKERS", "1"))
