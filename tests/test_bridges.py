import pytest
from dentalchart.errors import InvalidToothError
from dentalchart.models.procedure import BridgeRole
from dentalchart.services.bridges import (
    BridgeGesture,
    BridgeSpan,
    analyze_bridge,
    assemble_bridge,
    reconstruct_bridges,
)
from dentalchart.services.reconciler import reconcile
from dentalchart.state_machine import InvalidGestureTransitionError


class TestAssembleBridge:
    def test_single_tooth_is_no_bridge(self):
        assert assemble_bridge([14]) is None
        assert assemble_bridge([14, 14]) is None

    def test_roles_from_prior_state(self, chart_with_missing):
        span = assemble_bridge([14, 15, 16], chart_with_missing(15))
        assert span.teeth == (14, 15, 16)
        assert span.roles == (BridgeRole.ABUTMENT, BridgeRole.PONTIC, BridgeRole.ABUTMENT)
        assert span.bridge_id.startswith("bridge-")

    def test_touch_order_is_kept(self):
        span = assemble_bridge([16, 14, 15])
        assert span.teeth == (16, 14, 15)
        assert span.reference_abutment == 16

    def test_extracted_tooth_becomes_pontic(self, make_procedure):
        prior = reconcile([make_procedure("H11", tooth=25)])
        span = assemble_bridge([24, 25], prior)
        assert span.role_of(25) == BridgeRole.PONTIC

    def test_cantilever_is_valid(self, chart_with_missing):
        span = assemble_bridge([14, 15], chart_with_missing(15))
        assert span.is_cantilever
        assert span.abutments == [14]
        assert span.pontics == [15]

    def test_invalid_tooth_raises(self):
        with pytest.raises(InvalidToothError):
            assemble_bridge([14, 19])


class TestAnalyzeBridge:
    def span(self, abutments, pontics):
        teeth = tuple(abutments) + tuple(pontics)
        roles = (BridgeRole.ABUTMENT,) * len(abutments) + (BridgeRole.PONTIC,) * len(pontics)
        return BridgeSpan(bridge_id="bridge-test", teeth=teeth, roles=roles)

    def test_three_unit(self):
        analysis = analyze_bridge(self.span([16, 14], [15]))
        assert analysis.bridge_type == "3-unit bridge"
        assert analysis.complexity == "simple"
        assert analysis.abutments == (14, 16)

    def test_four_unit(self):
        analysis = analyze_bridge(self.span([13, 16], [14, 15]))
        assert analysis.bridge_type == "4-unit bridge"
        assert analysis.complexity == "moderate"

    def test_extended(self):
        analysis = analyze_bridge(self.span([13, 17], [14, 15, 16]))
        assert analysis.bridge_type == "5-unit extended bridge"
        assert analysis.complexity == "complex"
        assert not analysis.needs_five_or_more_code

    def test_five_abutments_need_extra_code(self):
        analysis = analyze_bridge(self.span([12, 13, 14, 15, 16], []))
        assert analysis.needs_five_or_more_code

    def test_cantilever_label(self):
        analysis = analyze_bridge(self.span([14], [15]))
        assert analysis.bridge_type == "2-unit bridge"
        assert analysis.complexity == "simple"


class TestBridgeGesture:
    def test_drag_creates_span(self, chart_with_missing):
        gesture = BridgeGesture(chart_with_missing(45))
        gesture.begin(44)
        gesture.touch(45)
        gesture.touch(45)
        gesture.touch(46)
        span = gesture.end()

        assert span.teeth == (44, 45, 46)
        assert span.roles == (BridgeRole.ABUTMENT, BridgeRole.PONTIC, BridgeRole.ABUTMENT)

    def test_role_recorded_on_first_touch(self, chart_with_missing):
        gesture = BridgeGesture(chart_with_missing(45))
        gesture.begin(45)
        assert gesture.role_of(45) == BridgeRole.PONTIC

    def test_one_tooth_drag_gives_nothing(self):
        gesture = BridgeGesture()
        gesture.begin(44)
        assert gesture.end() is None

    def test_cancel_discards(self):
        gesture = BridgeGesture()
        gesture.begin(44)
        gesture.touch(45)
        gesture.cancel()
        assert gesture.teeth == []
        assert gesture.bridge_id is None

    def test_end_without_begin_raises(self):
        with pytest.raises(InvalidGestureTransitionError):
            BridgeGesture().end()


class TestReconstructBridges:
    def test_groups_by_bridge_id(self, make_procedure):
        procedures = [
            make_procedure("R24", tooth=14, bridge_id="bridge-a", bridge_role=BridgeRole.ABUTMENT),
            make_procedure("R40", tooth=15, bridge_id="bridge-a", bridge_role=BridgeRole.PONTIC),
            make_procedure("R24", tooth=16, bridge_id="bridge-a", bridge_role=BridgeRole.ABUTMENT),
            make_procedure("R24", tooth=36, bridge_id="bridge-b", bridge_role=BridgeRole.ABUTMENT),
        ]
        spans = reconstruct_bridges(reconcile(procedures))

        assert len(spans) == 1
        assert spans[0].bridge_id == "bridge-a"
        assert spans[0].teeth == (14, 15, 16)
        assert spans[0].pontics == [15]

    def test_orphan_pontic_joins_adjacent_abutment(self, make_procedure):
        procedures = [
            make_procedure("R24", tooth=24, bridge_id="bridge-a", bridge_role=BridgeRole.ABUTMENT),
            make_procedure("R40", tooth=25, bridge_role=BridgeRole.PONTIC),
        ]
        spans = reconstruct_bridges(reconcile(procedures))

        assert len(spans) == 1
        assert spans[0].role_of(25) == BridgeRole.PONTIC
        assert spans[0].is_cantilever

    def test_orphan_pontic_searches_two_teeth_away(self, make_procedure):
        procedures = [
            make_procedure("R24", tooth=44, bridge_id="bridge-a", bridge_role=BridgeRole.ABUTMENT),
            make_procedure("R24", tooth=45, bridge_id="bridge-a", bridge_role=BridgeRole.ABUTMENT),
            make_procedure("R40", tooth=47, bridge_role=BridgeRole.PONTIC),
        ]
        spans = reconstruct_bridges(reconcile(procedures))
        assert 47 in spans[0].teeth

    def test_legacy_notes_are_read(self, make_procedure):
        procedures = [
            make_procedure("R24", tooth=14, notes="MAIN: 3-unit bridge bridge-1700 - porcelain crown abutment (first)"),
            make_procedure("R40", tooth=15, notes="BRIDGE-bridge-1700: porcelain pontic for 3-unit bridge"),
            make_procedure("R24", tooth=16, notes="BRIDGE-bridge-1700: porcelain crown abutment (last)"),
        ]
        spans = reconstruct_bridges(reconcile(procedures))

        assert len(spans) == 1
        assert spans[0].bridge_id == "bridge-1700"
        assert spans[0].teeth[0] == 14
        assert spans[0].pontics == [15]

    def test_lone_crown_is_not_a_bridge(self, make_procedure):
        spans = reconstruct_bridges(reconcile([make_procedure("R24", tooth=11)]))
        assert spans == []
