from ninja_extra.throttling import AnonRateThrottle, UserRateThrottle


class AnonDefaultThrottle(AnonRateThrottle):
    rate = "60/min"


class UserDefaultThrottle(UserRateThrottle):
    rate = "100/min"


class AuthThrottle(AnonRateThrottle):
    """Token issuance and refresh."""

    rate = "30/min"


class WriteThrottle(UserRateThrottle):
    """Creating events, sharing photos and posting chat messages over HTTP."""

    rate = "60/min"
