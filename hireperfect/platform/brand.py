"""Product naming used in the API title and startup log."""

BRAND_NAME = "Hireperfect"
BRAND_APP_DESCRIPTION = "Timed, proctored candidate assessments"
