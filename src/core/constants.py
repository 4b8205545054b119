"""Core constants used across Seabird modules.

This module centralizes the export column layout and runtime defaults.
Keeping values here avoids magic literals in parsing logic.
"""

from __future__ import annotations

HEADER_RECORD_NUMBER = 1

SUBMISSION_ID_COLUMN = 0
COMMON_NAME_COLUMN = 1
SCIENTIFIC_NAME_COLUMN = 2
TAXON_ORDER_COLUMN = 3
COUNT_COLUMN = 4
SUBNATIONAL1_CODE_COLUMN = 5
SUBNATIONAL2_NAME_COLUMN = 6
LOCATION_ID_COLUMN = 7
LOCATION_NAME_COLUMN = 8
LATITUDE_COLUMN = 9
LONGITUDE_COLUMN = 10
DATE_COLUMN = 11
TIME_COLUMN = 12
PROTOCOL_COLUMN = 13
DURATION_COLUMN = 14
COMPLETE_CHECKLIST_COLUMN = 15
DISTANCE_KM_COLUMN = 16
AREA_HECTARES_COLUMN = 17
PARTY_SIZE_COLUMN = 18
BREEDING_CODE_COLUMN = 19
ASSET_IDS_COLUMN = 22

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%I:%M %p"
COMPLETE_CHECKLIST_FLAG = "1"
ASSET_ID_SEPARATOR = " "

SOURCE_ENCODING = "utf-8-sig"
S3_URI_SCHEME = "s3://"
DEFAULT_MAX_PENDING_RECORDS = 25000
