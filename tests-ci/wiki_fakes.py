"""
Faux endpoint api.php pour les tests (httpx.MockTransport)
"""
import httpx


class FakeWikiApi:
    """
    Faux api.php: répond "page trouvée" pour les titres (query key) connus,
    "-1" pour les autres. Garde la trace des requêtes reçues.
    """

    def __init__(self, existing=(), status_code=200, raw_body=None):
        self.existing = set(existing)
        self.status_code = status_code
        self.raw_body = raw_body
        self.requests = []

    @property
    def titles(self):
        return [request.url.params.get("titles") for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.raw_body is not None:
            return httpx.Response(self.status_code, content=self.raw_body)

        title = request.url.params.get("titles")
        if title in self.existing:
            pages = {"42": {"pageid": 42, "ns": 0, "title": title.replace("_", " ")}}
        else:
            pages = {"-1": {"ns": 0, "title": title, "missing": ""}}
        return httpx.Response(self.status_code, json={"batchcomplete": "", "query": {"pages": pages}})
