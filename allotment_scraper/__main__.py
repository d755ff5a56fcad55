import sys

from allotment_scraper.cli import main

if __name__ == "__main__":
    sys.exit(main())
