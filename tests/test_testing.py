"""Tests for testing.py — env_files context manager."""

from envlayers._resolver import resolve
from envlayers.testing import env_files


class TestEnvFiles:
    def test_writes_text(self):
        with env_files(base="HOST=db\n") as paths:
            assert paths["base"].read_text(encoding="utf-8") == "HOST=db\n"

    def test_serializes_mappings(self):
        with env_files(local={"GREETING": 'say "hi" to $USER'}) as paths:
            assert resolve([paths["local"]])["GREETING"] == 'say "hi" to $USER'

    def test_layering(self):
        with env_files(base="HOST=db\nPORT=5432\n", local={"PORT": "5433"}) as paths:
            env = resolve([paths["base"], paths["local"]])
        assert dict(env) == {"HOST": "db", "PORT": "5433"}

    def test_files_removed_on_exit(self):
        with env_files(base="A=1\n") as paths:
            path = paths["base"]
            assert path.exists()
        assert not path.exists()
