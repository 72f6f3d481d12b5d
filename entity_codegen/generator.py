"""Generation pipeline.

Ties the build phase (closure, synthesis, descriptors) to the compile phase
(one expression per property per target). The build phase always sees the
whole property list before the first expression is compiled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from entity_codegen.catalog.registry import TypeCatalog
from entity_codegen.compiler.entity import EntityCompiler
from entity_codegen.compiler.principal import PrincipalCompiler
from entity_codegen.compiler.validation import apply_validation, leaf_wrap_for
from entity_codegen.core.config import GeneratorConfig, load_target_profile
from entity_codegen.core.enums import PropertyType
from entity_codegen.core.ir import ConnectorProperty, ConnectorSchema
from entity_codegen.synthesis.bundle import TypeBundle, build_type_bundle
from entity_codegen.targets.protocol import TargetProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledProperty:
    """The transform expression of one property for one target."""

    name: str
    target: str
    expression: str
    type_name: str | None = None


@dataclass
class GenerationResult:
    properties: list[CompiledProperty] = field(default_factory=list)
    declarations: dict[str, str] = field(default_factory=dict)
    bundle: TypeBundle | None = None

    def for_target(self, target: str) -> list[CompiledProperty]:
        return [prop for prop in self.properties if prop.target == target]

    def expression(self, target: str, name: str) -> str:
        """Expression of property *name* for *target*.

        Raises:
            KeyError: If no such property was compiled.
        """
        for prop in self.properties:
            if prop.target == target and prop.name == name:
                return prop.expression
        raise KeyError(f"{target}:{name}")


class Generator:
    """Compiles a connector schema into per-target property expressions.

    Example::

        generator = Generator.from_config(GeneratorConfig(targets=["typescript"]))
        result = generator.generate(schema)
        print(result.expression("typescript", "skills"))
    """

    def __init__(self, config: GeneratorConfig, catalog: TypeCatalog) -> None:
        self._config = config
        self._catalog = catalog
        self._profiles: dict[str, TargetProfile] = {
            target: load_target_profile(target) for target in config.targets
        }

    @classmethod
    def from_config(cls, config: GeneratorConfig | None = None) -> Generator:
        """Create a generator, loading the catalog named by *config*."""
        config = config or GeneratorConfig()
        return cls(config, TypeCatalog.load(config.catalog_path))

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    @property
    def catalog(self) -> TypeCatalog:
        return self._catalog

    def build(self, schema: ConnectorSchema) -> TypeBundle | None:
        """Run the build phase, or return None for schemas without people support."""
        if not schema.has_people_support:
            return None
        return build_type_bundle(schema, self._catalog, self._config.root_facet_type)

    def generate(self, schema: ConnectorSchema) -> GenerationResult:
        logger.info(
            "Generating %d properties for targets %s",
            len(schema.properties),
            ", ".join(self._profiles),
        )
        bundle = self.build(schema)
        result = GenerationResult(bundle=bundle)
        input_format = self._config.input_format or schema.input_format

        for target, profile in self._profiles.items():
            entities = EntityCompiler(
                profile, bundle.type_map if bundle else None, input_format
            )
            principals = PrincipalCompiler(profile)
            for prop in schema.properties:
                expression, type_name = self._compile_property(
                    prop, profile, entities, principals, bundle
                )
                result.properties.append(
                    CompiledProperty(prop.name, target, expression, type_name)
                )
            if bundle is not None:
                result.declarations[target] = profile.render_declarations(bundle)

        logger.info("Generated %d expressions", len(result.properties))
        return result

    def _compile_property(
        self,
        prop: ConnectorProperty,
        profile: TargetProfile,
        entities: EntityCompiler,
        principals: PrincipalCompiler,
        bundle: TypeBundle | None,
    ) -> tuple[str, str | None]:
        if prop.is_people_labelled and prop.person_entity is None:
            logger.debug("Property '%s' has a people label but no entity mapping", prop.name)
            return profile.missing_mapping(prop.name), None

        if prop.source.no_source:
            return profile.no_source(prop.type), None

        fields = prop.person_entity.fields if prop.person_entity else None
        if prop.type is PropertyType.PRINCIPAL:
            return principals.compile_principal(fields, prop.source), profile.principal_type
        if prop.type is PropertyType.PRINCIPAL_COLLECTION:
            return principals.compile_principal_collection(fields, prop.source), profile.principal_type

        if prop.person_entity is not None:
            type_info = bundle.type_info_for(prop.person_entity.entity) if bundle else None
            type_name = type_info.display_name(profile.language) if type_info else None
            wrap = leaf_wrap_for(prop, profile)
            if prop.type is PropertyType.STRING_COLLECTION:
                expression = entities.compile_entity_collection(
                    prop.person_entity.fields, wrap, type_info
                )
            else:
                expression = entities.compile_entity(prop.person_entity.fields, wrap, type_info)
            return expression, type_name

        literal = profile.source_literal(prop.source)
        expression = profile.parse_property(prop.type, literal)
        if prop.source.default is not None and prop.type in (
            PropertyType.STRING,
            PropertyType.STRING_COLLECTION,
        ):
            expression = profile.apply_default(
                expression,
                prop.source.default,
                collection=prop.type is PropertyType.STRING_COLLECTION,
            )
        return apply_validation(prop, expression, profile, literal), None
