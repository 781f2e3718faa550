from ideaflow.idea import STEP_PARAM, Location, MemoryLocation


class TestMemoryLocation:
    def test_implements_location(self) -> None:
        assert isinstance(MemoryLocation(), Location)

    def test_from_url_parses_query(self) -> None:
        location = MemoryLocation.from_url("/idea-hub/refinement?step=3&ref=mail")

        assert location.path == "/idea-hub/refinement"
        assert location.get_param(STEP_PARAM) == "3"
        assert location.get_param("ref") == "mail"
        assert location.get_param("missing") is None

    def test_replace_param_records_history(self) -> None:
        location = MemoryLocation()

        location.replace_param(STEP_PARAM, "1")
        location.replace_param(STEP_PARAM, "2")

        assert location.url == "/idea-hub/refinement?step=2"
        assert location.history == [
            "/idea-hub/refinement?step=1",
            "/idea-hub/refinement?step=2",
        ]

    def test_url_without_query(self) -> None:
        assert MemoryLocation(path="/ideas").url == "/ideas"
