"""Constants for the Trusted Traveler Programs scheduler API."""

DEFAULT_ENDPOINT = "https://ttp.cbp.dhs.gov/schedulerapi"

LOCATIONS_ENDPOINT = "locations"
SLOT_AVAILABILITY_ENDPOINT = "slot-availability"

LOCATION_ID_PARAM = "locationId"
