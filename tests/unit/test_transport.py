"""
Tests for AsyncAPIClient against a local aiohttp test server.
"""
import pytest
from aiohttp import web
from aiohttp import test_utils

from robinpy.core.api import APIConfig, AsyncAPIClient, AsyncAuthService, TimeoutConfig
from robinpy.core.exceptions import AuthError, NetworkError


def make_app(seen):
    async def token(request):
        form = await request.post()
        seen.append(dict(form))
        if form.get('password') != 'hunter2':
            return web.json_response({'detail': 'Unable to log in with provided credentials.'}, status=400)
        return web.json_response({'access_token': 'tok', 'expires_in': 86400})

    async def accounts(request):
        seen.append(request.headers.get('Authorization'))
        return web.json_response({'results': [{'account_number': '5RY12345'}]})

    async def download(request):
        return web.Response(body=b'%PDF' * 50000, content_type='application/pdf')

    app = web.Application()
    app.router.add_post('/oauth2/token/', token)
    app.router.add_get('/accounts/', accounts)
    app.router.add_get('/documents/1/download/', download)
    return app


class TestAsyncAPIClient:
    """Test suite for AsyncAPIClient."""

    @pytest.mark.asyncio
    async def test_send_form_and_token(self):
        seen = []
        async with test_utils.TestServer(make_app(seen)) as server:
            config = APIConfig(base_url=str(server.make_url('/')))
            async with AsyncAPIClient(config) as client:
                ok = await client.send('POST', '/oauth2/token/', data={'username': 'u', 'password': 'hunter2'})
                rejected = await client.send('POST', '/oauth2/token/', data={'username': 'u', 'password': 'x'})
                account = await client.send('GET', '/accounts/', token='tok')

        assert ok.ok and ok.status == 200
        assert rejected.status == 400 and not rejected.ok and not rejected.failed
        assert b'Unable to log in' in rejected.body
        assert account.ok
        assert seen[0] == {'username': 'u', 'password': 'hunter2'}
        assert seen[2] == 'Bearer tok'

    @pytest.mark.asyncio
    async def test_stream_download(self):
        async with test_utils.TestServer(make_app([])) as server:
            config = APIConfig(base_url=str(server.make_url('/')))
            async with AsyncAPIClient(config) as client:
                chunks = []
                async with client.stream(str(server.make_url('/documents/1/download/')), token='tok') as response:
                    assert response.ok
                    async for chunk in response.iter_chunks(4096):
                        chunks.append(chunk)

        assert b''.join(chunks) == b'%PDF' * 50000
        assert len(chunks) > 1

    @pytest.mark.asyncio
    async def test_connection_failure(self, unused_tcp_port):
        config = APIConfig(
            base_url=f'http://127.0.0.1:{unused_tcp_port}',
            timeout=TimeoutConfig(total=5, connect=2, sock_read=2, sock_connect=2)
        )
        async with AsyncAPIClient(config) as client:
            result = await client.send('GET', '/accounts/')

            assert result.failed
            assert result.status is None

            with pytest.raises(NetworkError):
                async with client.stream('/documents/1/download/'):
                    pass

    @pytest.mark.asyncio
    async def test_closed_client(self):
        client = AsyncAPIClient()
        await client.close()

        with pytest.raises(NetworkError):
            await client.send('GET', '/accounts/')

    @pytest.mark.asyncio
    async def test_auth_service_end_to_end(self):
        async with test_utils.TestServer(make_app([])) as server:
            config = APIConfig(base_url=str(server.make_url('/')))
            async with AsyncAPIClient(config) as client:
                auth = AsyncAuthService(client)
                result = await auth.request_token('u', 'hunter2')
                account = await auth.get_account(result.token)

                with pytest.raises(AuthError, match='Unable to log in'):
                    await auth.request_token('u', 'wrong')

        assert result.token == 'tok'
        assert result.expires_in == 86400
        assert account['account_number'] == '5RY12345'
