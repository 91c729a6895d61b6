"""Tests for the response action catalog"""

from healthwatch.recommendations.action_catalog import (
    ActionCatalog,
    ActionType,
    ResponseAction,
    Urgency,
)


class TestActionCatalog:
    """Test ActionCatalog"""

    def test_every_bucket_has_actions(self):
        catalog = ActionCatalog()

        for urgency in Urgency:
            assert catalog.filter_by_urgency(urgency)

    def test_filter_sorted_by_priority(self):
        catalog = ActionCatalog()

        priorities = [a.priority for a in catalog.filter_by_urgency(Urgency.URGENT)]

        assert priorities == sorted(priorities, reverse=True)

    def test_recommendations_render_region(self):
        catalog = ActionCatalog()

        recommendations = catalog.recommendations_for(Urgency.URGENT, "Agnigiri")

        assert recommendations[0] == "Issue an immediate boil-water advisory for the Agnigiri area."
        assert len(recommendations) <= 4

    def test_missing_region_still_reads(self):
        action = ActionCatalog().get_action("boil_water_advisory")

        assert "{region}" not in action.render("")

    def test_max_actions(self):
        catalog = ActionCatalog()

        assert len(catalog.recommendations_for(Urgency.URGENT, "X", max_actions=2)) == 2

    def test_add_action(self):
        catalog = ActionCatalog()
        catalog.add_action(ResponseAction(
            id="chlorination_drive",
            action_type=ActionType.SUPPLIES,
            text="Distribute chlorine tablets in {region}.",
            urgency=Urgency.TARGETED,
            priority=99
        ))

        assert catalog.recommendations_for(Urgency.TARGETED, "Barpeta")[0] == (
            "Distribute chlorine tablets in Barpeta."
        )
        assert catalog.get_action("missing") is None
