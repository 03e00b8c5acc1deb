import pytest

from objdecode.exceptions import OBJSchemaError, SchemaRule
from objdecode.registry import ElementType, RegistryBuilder, default_registry
from objdecode.schemas import SUPPORTED_ELEMENTS, Schema, get_schema


class TestElementType:
    """Tests for the ElementType enum."""

    def test_all_keywords(self) -> None:
        """Recognize every OBJ keyword and the end of file marker."""
        assert len(ElementType) == 41

    @pytest.mark.parametrize(
        ("keyword", "element_type"),
        [
            ("v", ElementType.VERTEX),
            ("usemtl", ElementType.USE_MATERIAL),
            ("shadow_obj", ElementType.SHADOW_OBJECT),
            ("curv2", ElementType.CURVE_2D),
        ],
    )
    def test_from_keyword(self, keyword: str, element_type: ElementType) -> None:
        """Look up element types by keyword."""
        assert ElementType.from_keyword(keyword) is element_type

    @pytest.mark.parametrize("keyword", ["", "foo", "V", "vertex"])
    def test_unknown_keyword(self, keyword: str) -> None:
        """Return ``None`` for words that are not keywords."""
        assert ElementType.from_keyword(keyword) is None

    @pytest.mark.parametrize(
        ("element_type", "description"),
        [
            (ElementType.VERTEX_TEXTURE, "vertex texture"),
            (ElementType.OBJECT, "object"),
            (ElementType.CURVE_2D, "curve 2D"),
            (ElementType.CSH, "csh command"),
            (ElementType.SURFACE_APPROXIMATION, "surface approximation technique"),
            (ElementType.END_OF_FILE, "end of file"),
        ],
    )
    def test_description(self, element_type: ElementType, description: str) -> None:
        """Describe element types in messages."""
        assert element_type.description == description


class TestRegistry:
    """Tests for the registry and its builder."""

    def test_default_registry(self) -> None:
        """Compile every supported element once."""
        registry = default_registry()

        assert set(registry) == set(SUPPORTED_ELEMENTS)
        assert default_registry() is registry
        assert registry["v"].element == "vertex"

    def test_immutable(self) -> None:
        """Reject modifications of a built registry."""
        registry = default_registry()

        with pytest.raises(TypeError):
            registry["g"] = registry["v"]  # type: ignore[index]

    def test_unknown_keyword(self) -> None:
        """Refuse to register a parser for a word that is not a keyword."""
        with pytest.raises(ValueError, match="Unknown OBJ element keyword"):
            RegistryBuilder().register("foo", get_schema("v"))

    def test_duplicate_keyword(self) -> None:
        """Refuse to register a keyword twice."""
        builder = RegistryBuilder().register("v", get_schema("v"))

        with pytest.raises(ValueError, match="already registered"):
            builder.register("v", get_schema("v"))

    def test_invalid_schema(self) -> None:
        """Install nothing when the schema is invalid."""
        builder = RegistryBuilder()

        with pytest.raises(OBJSchemaError) as excinfo:
            builder.register("g", Schema(element="group", fields=(), factory=dict))

        assert excinfo.value.rule is SchemaRule.EMPTY_SCHEMA
        assert len(builder.build()) == 0

    def test_builder_snapshot(self) -> None:
        """Leave built registries unchanged by later registrations."""
        builder = RegistryBuilder().register("v", get_schema("v"))
        registry = builder.build()
        builder.register("f", get_schema("f"))

        assert list(registry) == ["v"]
        assert list(builder.build()) == ["v", "f"]
