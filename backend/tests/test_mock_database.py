#!/usr/bin/env python
"""
Tests for the mock backend's storage behaviour
"""
import json
import threading

from services.mock_database import (
    SEEDS,
    STORAGE_KEY_FINALS,
    STORAGE_KEY_GROUPS,
    STORAGE_KEY_USERS,
    MockBackend,
)
from services.storage import FileStorage, MemoryStorage


class TestSeeding:

    def test_initialize_writes_every_collection(self):
        storage = MemoryStorage()
        MockBackend(storage=storage).initialize_database()
        assert sorted(storage.keys()) == sorted(SEEDS)

    def test_initialize_twice_keeps_changes(self, mock_backend):
        mock_backend.add_user({'name': 'Extra', 'email': 'extra@isfd26.edu.ar', 'role': 'DOCENTE'})
        mock_backend.initialize_database()
        assert len(mock_backend.get_users()) == 6

    def test_emptied_collection_stays_empty(self, mock_backend):
        for group in mock_backend.get_groups('2'):
            for member in group['members']:
                mock_backend.leave_group(member, group['id'])
        assert json.loads(mock_backend.storage.get_item(STORAGE_KEY_GROUPS)) == []

        mock_backend.initialize_database()
        assert mock_backend.get_groups('2') == []

    def test_lazy_seed_on_first_read(self):
        storage = MemoryStorage()
        backend = MockBackend(storage=storage)
        assert storage.get_item(STORAGE_KEY_USERS) is None

        assert len(backend.get_users()) == 5
        assert storage.get_item(STORAGE_KEY_USERS) is not None

    def test_passwords_are_stored_but_not_returned(self, mock_backend):
        stored = json.loads(mock_backend.storage.get_item(STORAGE_KEY_USERS))
        assert stored[0]['password'] == '123'
        assert 'password' not in mock_backend.get_user_by_id(stored[0]['id'])


class TestIds:

    def test_ids_are_unique_and_increasing(self, mock_backend):
        ids = [
            mock_backend.add_event({'title': f'E{i}', 'date': '2024-08-01', 'type': 'other'})['id']
            for i in range(5)
        ]
        numbers = [int(i) for i in ids]
        assert numbers == sorted(numbers)
        assert len(set(numbers)) == 5

    def test_group_ids_are_prefixed(self, mock_backend):
        group = mock_backend.create_group('Taller', ['1'], '2')
        assert group['id'].startswith('g')
        assert group['id'][1:].isdigit()


class TestFileBackedStore:

    def test_data_survives_a_restart(self, tmp_path):
        first = MockBackend(storage=FileStorage(str(tmp_path)))
        first.initialize_database()
        first.toggle_final_registration('1', 'f2')

        second = MockBackend(storage=FileStorage(str(tmp_path)))
        second.initialize_database()
        f2 = next(f for f in second.get_final_exams('1') if f['id'] == 'f2')
        assert f2['isRegistered'] is True

    def test_collections_are_plain_json_files(self, tmp_path):
        MockBackend(storage=FileStorage(str(tmp_path))).initialize_database()
        with open(tmp_path / f'{STORAGE_KEY_FINALS}.json', encoding='utf-8') as fh:
            finals = json.load(fh)
        assert [f['id'] for f in finals] == ['f1', 'f2', 'f3', 'f4']


class TestConcurrentWrites:

    def test_threads_do_not_lose_writes(self, mock_backend):
        def add_events(worker):
            for i in range(50):
                mock_backend.add_event({'title': f'T{worker}-{i}', 'date': '2024-08-01', 'type': 'other'})

        threads = [threading.Thread(target=add_events, args=(w,)) for w in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        added = [e for e in mock_backend.get_events() if e['title'].startswith('T')]
        assert len(added) == 400
        assert len({e['id'] for e in added}) == 400

    def test_concurrent_registration_toggles(self, mock_backend):
        students = [str(n) for n in range(100, 140)]
        threads = [
            threading.Thread(target=mock_backend.toggle_final_registration, args=(s, 'f1'))
            for s in students
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        f1 = next(f for f in mock_backend.get_final_exams('100') if f['id'] == 'f1')
        assert f1['registeredCount'] == 40
