import json
import string
import pkgutil
from html import escape


def _decode(b: bytes, charset: str = "utf-8") -> str:
    return b.decode(charset)


def _js_string(value: str) -> str:
    return json.dumps(value).replace("</", "<\\/")


class IDEPage:
    """Static GraphiQL page pointed at the query endpoint"""

    def __init__(self, endpoint_url: str, name: str) -> None:
        data = pkgutil.get_data("kotoba", "assets/graphiql.html")
        assert data is not None, "graphiql.html is missing"
        template = string.Template(_decode(data))
        self.content = template.safe_substitute(
            endpoint_url=_js_string(endpoint_url),
            name=escape(name),
        )
