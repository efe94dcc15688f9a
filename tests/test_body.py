"""
Tests for body content extraction.

Covers JSON (including vendor JSON types), url-encoded and multipart forms,
unsupported content types and re-reading the same request.
"""

import json

import pytest

from mockbuilders.mock.body import extract_body_content, is_form_content_type, is_json_content_type

URL = 'https://www.example.org/test'


class TestContentTypes:
    """Test content-type sniffing."""

    @pytest.mark.parametrize('content_type', [
        'application/json',
        'application/json; charset=utf-8',
        'application/x-amz-json-1.1',
        'application/vnd.api+json',
    ])
    def test_json(self, content_type):
        assert is_json_content_type(content_type)

    @pytest.mark.parametrize('content_type', [None, '', 'text/plain', 'text/json', 'application/xml'])
    def test_not_json(self, content_type):
        assert not is_json_content_type(content_type)

    def test_forms(self):
        assert is_form_content_type('multipart/form-data; boundary=x')
        assert is_form_content_type('application/x-www-form-urlencoded')
        assert not is_form_content_type('text/plain')


@pytest.mark.asyncio
async def test_json_body(make_request):
    request = make_request(URL, 'POST', json_body={'input': 'Daniel'})

    assert await extract_body_content(request) == {'input': 'Daniel'}


@pytest.mark.asyncio
async def test_vendor_json_body(make_request):
    request = make_request(
        URL, 'POST',
        headers={'Content-Type': 'application/x-amz-json-1.1'},
        body=json.dumps({'TableName': 'users'}).encode()
    )

    assert await extract_body_content(request) == {'TableName': 'users'}


@pytest.mark.asyncio
async def test_urlencoded_form(make_request):
    request = make_request(
        URL, 'POST',
        headers={'Content-Type': 'application/x-www-form-urlencoded'},
        body=b'input=Daniel&tag=a&tag=b'
    )

    assert await extract_body_content(request) == {'input': 'Daniel', 'tag': 'b'}


@pytest.mark.asyncio
async def test_multipart_form(make_request):
    boundary = 'mockbuildersboundary'
    body = (
        f'--{boundary}\r\n'
        'Content-Disposition: form-data; name="input"\r\n'
        '\r\n'
        'Daniel\r\n'
        f'--{boundary}--\r\n'
    ).encode()
    request = make_request(
        URL, 'POST',
        headers={'Content-Type': f'multipart/form-data; boundary={boundary}'},
        body=body
    )

    assert await extract_body_content(request) == {'input': 'Daniel'}


@pytest.mark.asyncio
async def test_unsupported_content_type_is_empty(make_request):
    request = make_request(URL, 'POST', headers={'Content-Type': 'text/plain'}, body=b'hello')

    assert await extract_body_content(request) == {}


@pytest.mark.asyncio
async def test_missing_content_type_is_empty(make_request):
    request = make_request(URL, 'POST', body=b'{"input": "Daniel"}')

    assert await extract_body_content(request) == {}


@pytest.mark.asyncio
async def test_malformed_json_propagates(make_request):
    request = make_request(
        URL, 'POST',
        headers={'Content-Type': 'application/json'},
        body=b'{not json'
    )

    with pytest.raises(json.JSONDecodeError):
        await extract_body_content(request)


@pytest.mark.asyncio
async def test_body_can_be_extracted_repeatedly(make_request):
    request = make_request(
        URL, 'POST',
        headers={'Content-Type': 'application/x-www-form-urlencoded'},
        body=b'input=Daniel'
    )
    await request.body()

    first = await extract_body_content(request)
    second = await extract_body_content(request)

    assert first == second == {'input': 'Daniel'}


@pytest.mark.asyncio
async def test_sync_response_like_source():
    class FakeResponse:
        headers = {'content-type': 'application/json'}

        def json(self):
            return {'ok': True}

    assert await extract_body_content(FakeResponse()) == {'ok': True}
