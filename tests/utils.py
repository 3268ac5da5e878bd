from persistent_cookiejar.services import Cookie

NOW = 1_700_000_000.0


class FakeClock:
    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_cookie(name="sid", value="abc", domain="example.com", **kwargs) -> Cookie:
    kwargs.setdefault("expires_at", NOW + 3600)
    kwargs.setdefault("persistent", True)
    return Cookie(name=name, value=value, domain=domain, **kwargs)
