"""
Unit tests for saved-profile persistence.
"""

import json

from reformat.core.profiles import ProfileType
from reformat.core.settings_resolver import resolve_for_profile, resolve_from_quiz
from reformat.session.profile_store import InMemoryProfileRepository, JsonProfileRepository


class TestJsonProfileRepository:

    def test_missing_file_loads_empty(self, tmp_path):
        assert JsonProfileRepository(tmp_path / "none.json").load() == []

    def test_save_then_load(self, tmp_path):
        repo = JsonProfileRepository(tmp_path / "data" / "saved_profiles.json")
        profiles = [
            resolve_for_profile(ProfileType.DYSLEXIA).renamed("saved_1", "Reading"),
            resolve_from_quiz(ProfileType.ADHD, True).renamed("saved_2", "Focus"),
        ]
        assert repo.save(profiles) is True
        assert repo.load() == profiles

    def test_stored_as_one_camel_case_array(self, tmp_path):
        path = tmp_path / "saved_profiles.json"
        JsonProfileRepository(path).save([resolve_for_profile(ProfileType.ELL).renamed("s1", "Mine")])
        data = json.loads(path.read_text(encoding="utf-8"))
        assert isinstance(data, list)
        assert data[0]["baseProfile"] == "ELL"
        assert "fontFamily" in data[0]["customizations"]

    def test_save_overwrites_whole_array(self, tmp_path):
        repo = JsonProfileRepository(tmp_path / "p.json")
        first = resolve_for_profile(ProfileType.ADHD).renamed("a", "A")
        second = resolve_for_profile(ProfileType.ELL).renamed("b", "B")
        repo.save([first, second])
        repo.save([second])
        assert [p.id for p in repo.load()] == ["b"]

    def test_corrupt_json_is_discarded(self, tmp_path):
        path = tmp_path / "p.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonProfileRepository(path).load() == []

    def test_wrong_shape_is_discarded(self, tmp_path):
        path = tmp_path / "p.json"
        path.write_text(json.dumps({"id": "x"}), encoding="utf-8")
        assert JsonProfileRepository(path).load() == []
        path.write_text(json.dumps([{"id": "x", "name": "n", "baseProfile": "WIZARD"}]), encoding="utf-8")
        assert JsonProfileRepository(path).load() == []

    def test_unwritable_location_reports_failure(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        repo = JsonProfileRepository(blocker / "p.json")
        assert repo.save([]) is False


class TestInMemoryProfileRepository:

    def test_load_returns_copy(self):
        repo = InMemoryProfileRepository()
        repo.save([resolve_for_profile(ProfileType.ADHD)])
        loaded = repo.load()
        loaded.clear()
        assert len(repo.load()) == 1
        assert repo.save_count == 1
