"""Tests for the geographic access gate."""

import pytest

from jotam.gate import AccessDecisionKind, check_content, evaluate_access, normalize_place
from jotam.models import ContentLocation, ResolvedLocation


@pytest.fixture
def viewer() -> ResolvedLocation:
    return ResolvedLocation(
        condo="Rua Direita, 10", neighborhood="Centro", city="São Paulo",
        latitude=-23.55, longitude=-46.63,
    )


class TestNormalizePlace:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("São Paulo", "sao paulo"),
            ("  SÃO LUÍS ", "sao luis"),
            ("Jardim Ângela", "jardim angela"),
            ("Sé", "se"),
        ],
    )
    def test_normalize(self, text, expected):
        assert normalize_place(text) == expected


class TestFailOpen:
    """Missing data on either side never blocks."""

    def test_no_viewer_location(self):
        decision = evaluate_access(None, "AnyCity")

        assert decision.kind == AccessDecisionKind.ALLOW

    @pytest.mark.parametrize("city", [None, "", "   "])
    def test_content_without_city(self, viewer, city):
        decision = evaluate_access(viewer, city, "Vila Nova")

        assert decision.kind == AccessDecisionKind.ALLOW

    def test_bypass_ignores_mismatch(self, viewer):
        decision = evaluate_access(viewer, "Rio de Janeiro", "Copacabana", bypass=True)

        assert decision.kind == AccessDecisionKind.ALLOW
        assert decision.banner is None
        assert decision.block is None


class TestCityBlock:
    def test_different_city_blocks(self, viewer):
        decision = evaluate_access(viewer, "Rio de Janeiro", None, "@minha_loja")

        assert decision.kind == AccessDecisionKind.BLOCK
        assert decision.renders_content is False
        assert decision.block.content_city == "Rio de Janeiro"
        assert decision.block.viewer_city == "São Paulo"
        assert "@minha_loja" in decision.block.message
        assert decision.block.action_label == "Ver o que rola em São Paulo"
        assert decision.block.action_target == "/"

    def test_default_display_name(self, viewer):
        decision = evaluate_access(viewer, "Campinas")

        assert decision.block.message.startswith("Esta vitrine")

    @pytest.mark.parametrize("city", ["Sao Paulo", "são paulo", " SÃO PAULO "])
    def test_diacritic_insensitive_match(self, viewer, city):
        decision = evaluate_access(viewer, city)

        assert decision.kind != AccessDecisionKind.BLOCK

    @pytest.mark.parametrize("city", ["Unknown City", "Cidade Desconhecida", "desconhecido"])
    def test_unknown_content_city_never_blocks(self, viewer, city):
        decision = evaluate_access(viewer, city)

        assert decision.kind == AccessDecisionKind.ALLOW


class TestNeighborhoodWarn:
    def test_different_neighborhood_warns(self, viewer):
        decision = evaluate_access(viewer, "São Paulo", "Vila Nova")

        assert decision.kind == AccessDecisionKind.WARN
        assert decision.renders_content is True
        assert decision.banner.neighborhood == "Vila Nova"
        assert "Vila Nova" in decision.banner.message

    def test_same_neighborhood_allows(self, viewer):
        decision = evaluate_access(viewer, "Sao Paulo", "centro")

        assert decision.kind == AccessDecisionKind.ALLOW

    def test_missing_content_neighborhood_allows(self, viewer):
        assert evaluate_access(viewer, "São Paulo", None).kind == AccessDecisionKind.ALLOW

    @pytest.mark.parametrize("neighborhood", ["Unknown Neighborhood", "Bairro Desconhecido", "desconhecido"])
    def test_unknown_content_neighborhood_allows(self, viewer, neighborhood):
        assert evaluate_access(viewer, "São Paulo", neighborhood).kind == AccessDecisionKind.ALLOW

    def test_unknown_viewer_neighborhood_allows(self, unknown_neighborhood):
        decision = evaluate_access(unknown_neighborhood, "Registro", "Centro")

        assert decision.kind == AccessDecisionKind.ALLOW

    def test_unknown_content_city_still_checks_neighborhood(self, viewer):
        decision = evaluate_access(viewer, "Unknown City", "Vila Nova")

        assert decision.kind == AccessDecisionKind.WARN

    def test_abbreviations_are_not_expanded(self, viewer):
        vila_nova = viewer.with_neighborhood("Vila Nova")

        decision = evaluate_access(vila_nova, "São Paulo", "V. Nova")

        assert decision.kind == AccessDecisionKind.WARN


class TestDeterminism:
    def test_same_inputs_same_decision(self, viewer):
        first = evaluate_access(viewer, "São Paulo", "Vila Nova", "@loja")
        second = evaluate_access(viewer, "São Paulo", "Vila Nova", "@loja")

        assert first == second

    def test_check_content(self, viewer):
        content = ContentLocation(city="Rio de Janeiro", neighborhood="Centro", display_name="@loja_rio")

        decision = check_content(viewer, content)

        assert decision.kind == AccessDecisionKind.BLOCK
        assert "@loja_rio" in decision.block.message
