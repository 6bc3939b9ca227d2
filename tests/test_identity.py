"""
Unit tests for remote user, session and memory identifiers.
"""

import pytest

from memory_context.models.core import UserMemory
from memory_context.utils.identity import generate_memory_id, generate_session_id, remote_user_id


@pytest.mark.unit
class TestRemoteUserId:

    def test_concatenates_workspace_and_user(self):
        user = UserMemory(user_id='alice', workspace_id='acme', email='a@acme.io')
        assert remote_user_id(user) == 'acme_alice'

    def test_is_deterministic(self):
        user = UserMemory(user_id='alice', workspace_id='acme', email='a@acme.io')
        assert remote_user_id(user) == remote_user_id(user)

    def test_different_users_same_workspace_differ(self):
        alice = UserMemory(user_id='alice', workspace_id='acme', email='a@acme.io')
        bob = UserMemory(user_id='bob', workspace_id='acme', email='a@acme.io')
        assert remote_user_id(alice) != remote_user_id(bob)

    def test_profile_fields_do_not_change_identity(self):
        before = UserMemory(user_id='alice', workspace_id='acme', email='old@acme.io', first_name='Al')
        after = UserMemory(user_id='alice', workspace_id='acme', email='new@acme.io', first_name='Alice')
        assert remote_user_id(before) == remote_user_id(after)

    def test_separator_is_not_escaped(self):
        # Known ambiguity: the separator may also appear inside either field
        first = UserMemory(user_id='a', workspace_id='ws_1', email='x@y.z')
        second = UserMemory(user_id='1_a', workspace_id='ws', email='x@y.z')
        assert remote_user_id(first) == remote_user_id(second)


@pytest.mark.unit
class TestGeneratedIds:

    def test_session_id_uses_millis(self):
        assert generate_session_id('u1', timestamp=1700000000.5) == 'session_u1_1700000000500'

    def test_memory_id_strips_non_alphanumerics(self):
        assert generate_memory_id('u1', 'Hi, there! friend', timestamp=1) == 'memory_u1_Hither_1000'
