"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 250
EMAIL_MAX_LENGTH = 200

# MySQL ER_DUP_ENTRY
MYSQL_DUPLICATE_ENTRY = 1062
