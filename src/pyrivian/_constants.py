"""Internal constants shared across the library."""

BASE_PATH = "https://rivian.com/api/gql"
GATEWAY_URL = f"{BASE_PATH}/gateway/graphql"
ORDERS_URL = f"{BASE_PATH}/orders/graphql"

USER_AGENT = "RivianApp/1304 CFNetwork/1404.0.5 Darwin/22.3.0"
APOLLO_CLIENT_NAME = "com.rivian.ios.consumer-apollo-ios"

BASE_HEADERS: dict[str, str] = {
    "User-Agent": USER_AGENT,
    "Accept": "application/json",
    "Content-Type": "application/json",
    "Apollographql-Client-Name": APOLLO_CLIENT_NAME,
}

# Power state vocabulary: ready, go, sleep, standby.
POWER_STATE_READY = "ready"
POWER_STATE_SLEEP = "sleep"

DEFAULT_STATE_FILE = "rivian_auth.state"
CREDENTIALS_FORMAT_VERSION = 1

#: Fixed backoff between anti-forgery bootstrap attempts in ``resume``.
ANTI_FORGERY_RETRY_DELAY: float = 5.0
