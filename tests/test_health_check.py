"""
Unit tests for health and system information reporting.
"""

from unittest.mock import AsyncMock

import pytest

from memory_context.utils.health_check import SERVICE_NAME, check_health, get_health_status, get_system_info


@pytest.mark.unit
class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy_client(self):
        client = AsyncMock()
        client.health_check.return_value = True
        status = await get_health_status(client)
        assert status['components']['zep'] == {'healthy': True, 'service': 'Zep Cloud'}
        assert await check_health(client) is True

    @pytest.mark.asyncio
    async def test_unhealthy_client(self):
        client = AsyncMock()
        client.health_check.return_value = False
        assert await check_health(client) is False

    @pytest.mark.asyncio
    async def test_probe_exception_is_reported(self):
        client = AsyncMock()
        client.health_check.side_effect = RuntimeError('socket closed')
        status = await get_health_status(client)
        assert status['components']['zep']['healthy'] is False
        assert status['components']['zep']['error'] == 'socket closed'

    @pytest.mark.asyncio
    async def test_system_info(self):
        client = AsyncMock()
        client.health_check.return_value = True
        info = await get_system_info(client)
        assert info['service_name'] == SERVICE_NAME
        assert info['configuration']['max_data_size_characters'] > 0
        assert 'enable_zep_memory' in info['features']
        assert info['health_status']['components']['zep']['healthy'] is True
