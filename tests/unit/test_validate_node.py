"""Unit tests for ValidateNode."""
from src.nodes.validate import ValidateNode


class TestValidateNode:
    def test_complete_ticket(self):
        result = ValidateNode()({
            "extracted_fields": {"ticket_number": "12345", "weight_tons": "3"},
            "trajectory": ["extract"],
        })

        assert result["needs_fix"] is False
        assert result["missing_fields"] == []
        assert result["trajectory"] == ["extract", "validate"]

    def test_missing_weight(self):
        result = ValidateNode()({"extracted_fields": {"ticket_number": "12345"}, "trajectory": []})

        assert result["needs_fix"] is True
        assert result["missing_fields"] == ["weight_tons"]

    def test_missing_everything(self):
        result = ValidateNode()({"extracted_fields": None, "trajectory": []})

        assert result["needs_fix"] is True
        assert result["missing_fields"] == ["ticket_number", "weight_tons"]

    def test_optional_fields_do_not_matter(self):
        result = ValidateNode()({
            "extracted_fields": {"ticket_number": "12345", "weight_tons": "3", "driver_actual": None},
            "trajectory": [],
        })
        assert result["needs_fix"] is False

    def test_skips_on_error(self):
        result = ValidateNode()({"final_status": "error", "trajectory": []})
        assert result == {"trajectory": ["validate"]}
