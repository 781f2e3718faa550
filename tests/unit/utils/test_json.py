from ideaflow.utils import dump_json, load_json


class TestLoadJson:
    def test_parses_object(self) -> None:
        assert load_json(b'{"code": "23505"}') == {"code": "23505"}

    def test_invalid_json_returns_none(self) -> None:
        assert load_json("<html>Bad Gateway</html>") is None


class TestDumpJson:
    def test_compact_by_default(self) -> None:
        assert dump_json({"step": 1}) == '{"step":1}'

    def test_indent(self) -> None:
        assert dump_json({"step": 1}, indent=True) == '{\n  "step": 1\n}'
