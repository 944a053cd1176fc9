"""
Unit tests for registry storage backends
"""

import json
import os
import tempfile

import pytest

from keygate.models.key_record import KeyRecord
from keygate.models.registry import Registry
from keygate.services.registry_storage import JsonFileRegistryStorage, InMemoryRegistryStorage
from keygate.utils.errors import RegistryStorageError


CREATED = 1_700_000_000_000


def _sample_registry() -> Registry:
    record = KeyRecord.create_new(key="k" * 32, user_id="u1", created=CREATED)
    registry = Registry.empty()
    registry.keys[record.key] = record
    registry.last_generation["u1"] = CREATED
    registry.stats.total_generated = 1
    registry.stats.active_keys = 1
    return registry


class TestJsonFileRegistryStorage:
    """Test cases for JsonFileRegistryStorage"""
    
    @pytest.fixture
    def temp_dir(self):
        """Create temporary directory for registry files"""
        with tempfile.TemporaryDirectory() as path:
            yield path
    
    @pytest.fixture
    def db_path(self, temp_dir):
        return os.path.join(temp_dir, 'keys_database.json')
    
    def test_init_creates_empty_registry(self, db_path):
        """Test that initialization writes an empty registry on first run"""
        assert not os.path.exists(db_path)
        
        JsonFileRegistryStorage(db_path)
        
        with open(db_path, encoding='utf-8') as fh:
            data = json.load(fh)
        assert data == {
            'keys': {},
            'lastGeneration': {},
            'stats': {'totalGenerated': 0, 'activeKeys': 0, 'expiredKeys': 0}
        }
    
    def test_init_creates_parent_directories(self, temp_dir):
        """Test that missing parent directories are created"""
        path = os.path.join(temp_dir, 'nested', 'dir', 'keys.json')
        
        JsonFileRegistryStorage(path)
        
        assert os.path.exists(path)
    
    def test_init_keeps_existing_file(self, db_path):
        """Test that an existing registry is not overwritten"""
        JsonFileRegistryStorage(db_path).save(_sample_registry())
        
        storage = JsonFileRegistryStorage(db_path)
        
        assert "k" * 32 in storage.load().keys
    
    def test_save_and_load(self, db_path):
        """Test that a saved registry loads back unchanged"""
        storage = JsonFileRegistryStorage(db_path)
        registry = _sample_registry()
        
        storage.save(registry)
        loaded = storage.load()
        
        assert loaded.to_dict() == registry.to_dict()
    
    def test_save_is_pretty_printed(self, db_path):
        """Test the file uses two-space indentation"""
        storage = JsonFileRegistryStorage(db_path)
        storage.save(_sample_registry())
        
        with open(db_path, encoding='utf-8') as fh:
            text = fh.read()
        assert text.startswith('{\n  "keys": {')
    
    def test_save_leaves_no_temp_files(self, temp_dir, db_path):
        """Test that the temp file is renamed over the registry"""
        storage = JsonFileRegistryStorage(db_path)
        storage.save(_sample_registry())
        
        assert os.listdir(temp_dir) == ['keys_database.json']
    
    def test_load_corrupt_json(self, db_path):
        """Test that unparseable content raises instead of resetting the registry"""
        storage = JsonFileRegistryStorage(db_path)
        with open(db_path, 'w', encoding='utf-8') as fh:
            fh.write('{"keys": {')
        
        with pytest.raises(RegistryStorageError, match="Cannot read key registry"):
            storage.load()
    
    def test_load_wrong_shape(self, db_path):
        """Test that valid JSON with the wrong layout raises"""
        storage = JsonFileRegistryStorage(db_path)
        with open(db_path, 'w', encoding='utf-8') as fh:
            json.dump({'keys': {}}, fh)
        
        with pytest.raises(RegistryStorageError, match="is corrupt"):
            storage.load()
    
    def test_load_invalid_record(self, db_path):
        """Test that a key record with expiry before creation raises"""
        storage = JsonFileRegistryStorage(db_path)
        with open(db_path, 'w', encoding='utf-8') as fh:
            json.dump({
                'keys': {'abc': {'userId': 'u1', 'created': 2000, 'expiry': 1000, 'status': 'active'}},
                'lastGeneration': {'u1': 2000},
                'stats': {'totalGenerated': 1, 'activeKeys': 1, 'expiredKeys': 0}
            }, fh)
        
        with pytest.raises(RegistryStorageError, match="is corrupt"):
            storage.load()
    
    def test_load_missing_file(self, db_path):
        """Test that a registry deleted after startup raises"""
        storage = JsonFileRegistryStorage(db_path)
        os.unlink(db_path)
        
        with pytest.raises(RegistryStorageError):
            storage.load()
    
    def test_save_to_missing_directory(self, temp_dir, db_path):
        """Test that an unwritable location raises"""
        storage = JsonFileRegistryStorage(db_path)
        os.unlink(db_path)
        os.rmdir(temp_dir)
        
        with pytest.raises(RegistryStorageError, match="Cannot write key registry"):
            storage.save(_sample_registry())
        
        # TemporaryDirectory cleanup expects the directory back
        os.makedirs(temp_dir)
    
    def test_storage_error_is_runtime_error(self, db_path):
        """Test storage errors propagate as RuntimeError to generic handlers"""
        storage = JsonFileRegistryStorage(db_path)
        os.unlink(db_path)
        
        with pytest.raises(RuntimeError):
            storage.load()


class TestInMemoryRegistryStorage:
    """Test cases for InMemoryRegistryStorage"""
    
    def test_starts_empty(self):
        """Test the default registry is empty"""
        storage = InMemoryRegistryStorage()
        
        assert storage.load().to_dict() == Registry.empty().to_dict()
    
    def test_seeded_registry(self):
        """Test seeding with an existing registry"""
        storage = InMemoryRegistryStorage(_sample_registry())
        
        assert storage.load().stats.total_generated == 1
    
    def test_loads_are_detached(self):
        """Test that mutating a loaded registry does not change the store until saved"""
        storage = InMemoryRegistryStorage()
        registry = storage.load()
        registry.last_generation["u1"] = CREATED
        
        assert storage.load().last_generation == {}
        
        storage.save(registry)
        assert storage.load().last_generation == {"u1": CREATED}
    
    def test_counts_operations(self):
        """Test load and save counters"""
        storage = InMemoryRegistryStorage()
        storage.save(storage.load())
        storage.load()
        
        assert storage.load_count == 2
        assert storage.save_count == 1
        assert storage.snapshot()['stats']['totalGenerated'] == 0
