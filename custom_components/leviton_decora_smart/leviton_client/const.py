"""Constants for the Leviton REST client."""

DEFAULT_BASE_URL = "https://my.leviton.com/api"

# REST API Endpoints
ENDPOINT_LOGIN = "/Person/login?include=user"
ENDPOINT_RESIDENTIAL_PERMISSIONS = "/Person/{person_id}/residentialPermissions"
ENDPOINT_RESIDENTIAL_ACCOUNT = "/ResidentialAccounts/{account_id}"
ENDPOINT_RESIDENCE_IOT_SWITCHES = "/Residences/{residence_id}/iotSwitches"
ENDPOINT_IOT_SWITCH = "/IotSwitches/{switch_id}"
