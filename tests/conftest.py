"""
Shared fixtures: an in-memory stand-in for the Zep gateway.

FakeZepClient implements the same coroutines as ZepClient, keeps users and
sessions in dicts and records every call in ``calls`` as (method, args) tuples.
"""

from typing import Any, Dict, List, Optional

import pytest

from memory_context.models.core import ChatMessage, UserMemory
from memory_context.services.memory_service import MemoryService
from memory_context.utils.zep_client import ZepConflictError, ZepError, ZepNotFoundError


class FakeZepClient:

    def __init__(self):
        self.users: Dict[str, Dict[str, Any]] = {}
        self.sessions: Dict[str, Dict[str, Any]] = {}
        self.session_messages: Dict[str, List[ChatMessage]] = {}
        self.search_results: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}
        self.calls: List[tuple] = []
        # method name -> exception raised on the next call(s)
        self.failures: Dict[str, Exception] = {}
        self.add_user_conflict = False

    def _record(self, method: str, *args):
        self.calls.append((method, args))
        if method in self.failures:
            raise self.failures[method]

    def called(self, method: str) -> List[tuple]:
        return [args for name, args in self.calls if name == method]

    async def get_user(self, user_id: str):
        self._record('get_user', user_id)
        if user_id not in self.users:
            raise ZepNotFoundError(f'user {user_id} not found')
        return self.users[user_id]

    async def add_user(self, user_id: str, email: str, first_name: Optional[str] = None, last_name: Optional[str] = None):
        self._record('add_user', user_id, email, first_name, last_name)
        if self.add_user_conflict:
            self.users[user_id] = {'user_id': user_id, 'email': email}
            raise ZepConflictError(f'user {user_id} already exists')
        self.users[user_id] = {'user_id': user_id, 'email': email, 'first_name': first_name, 'last_name': last_name}
        return self.users[user_id]

    async def update_user(self, user_id: str, email: str, first_name: Optional[str] = None, last_name: Optional[str] = None):
        self._record('update_user', user_id, email, first_name, last_name)
        self.users[user_id] = {'user_id': user_id, 'email': email, 'first_name': first_name, 'last_name': last_name}
        return self.users[user_id]

    async def get_session(self, session_id: str):
        self._record('get_session', session_id)
        if session_id not in self.sessions:
            raise ZepNotFoundError(f'session {session_id} not found')
        return self.sessions[session_id]

    async def add_session(self, user_id: str, session_id: str):
        self._record('add_session', user_id, session_id)
        self.sessions[session_id] = {'session_id': session_id, 'user_id': user_id}
        return self.sessions[session_id]

    async def add_messages(self, session_id: str, messages, return_context: Optional[bool] = None):
        self._record('add_messages', session_id, messages, return_context)
        return {'session_id': session_id, 'count': len(messages)}

    async def get_session_messages(self, session_id: str, limit: int = 20):
        self._record('get_session_messages', session_id, limit)
        return self.session_messages.get(session_id, [])[-limit:]

    async def search_graph(self, user_id: str, query: str, scope: str, limit: int, reranker: str):
        self._record('search_graph', user_id, query, scope, limit, reranker)
        return self.search_results.get(scope, {'edges': [], 'nodes': []})

    async def add_graph_data(self, user_id: str, data: str, data_type: str = 'text'):
        self._record('add_graph_data', user_id, data, data_type)
        return {'uuid': f'episode-{len(self.called("add_graph_data"))}', 'length': len(data)}

    async def set_entity_types(self, entity_types):
        self._record('set_entity_types', entity_types)
        return {'ok': True}


@pytest.fixture
def fake_client():
    return FakeZepClient()


@pytest.fixture
def user():
    return UserMemory(user_id='u1', workspace_id='ws1', email='ada@example.com', first_name='Ada', last_name='Lovelace')


@pytest.fixture
def service(fake_client):
    return MemoryService(fake_client, max_data_size=10000)


@pytest.fixture
def network_error():
    return ZepError('Failed to search_graph: connection reset')


@pytest.fixture
def fact_and_entity_results():
    return {
        'edges': {
            'edges': [{
                'uuid': 'e1',
                'fact': 'Ada prefers tea over coffee',
                'score': 0.91,
                'source': None
            }],
            'nodes': []
        },
        'nodes': {
            'edges': [],
            'nodes': [{
                'uuid': 'n1',
                'name': 'Analytical Engine',
                'labels': ['Project', 'Entity'],
                'summary': 'A mechanical computer design',
                'attributes': {
                    'status': 'design'
                }
            }]
        },
    }
