"""CSV serialization and on-disk storage of crawl results."""

from allotment_scraper.output.serializer import records_to_csv, csv_to_records
from allotment_scraper.output.storage import CsvStorage

__all__ = ["records_to_csv", "csv_to_records", "CsvStorage"]
