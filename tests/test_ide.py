import json

from kotoba.ide import IDEPage


def test_endpoint_url():
    page = IDEPage("/api/query", "Kotoba Server")
    assert 'url: "/api/query"' in page.content
    assert "<title>Kotoba Server - GraphiQL</title>" in page.content


def test_endpoint_url_is_js_string():
    url = '/api/"q"\\x'
    page = IDEPage(url, "Kotoba Server")
    assert "url: {}".format(json.dumps(url)) in page.content
    assert "&quot;" not in page.content


def test_script_end_tag():
    page = IDEPage("/api/</script>", "Kotoba Server")
    assert 'url: "/api/<\\/script>"' in page.content


def test_name_is_escaped():
    page = IDEPage("/api/query", "<b>Server</b>")
    assert "&lt;b&gt;Server&lt;/b&gt;" in page.content
