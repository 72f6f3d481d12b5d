"""
Example 02: Derived Types

This example shows how two properties mapping disjoint paths onto the same
custom entity produce one merged set of derived type declarations.
"""

from entity_codegen import Generator, GeneratorConfig
from entity_codegen.core.ir import ConnectorSchema


def main():
    schema = ConnectorSchema.model_validate(
        {
            "contentCategory": "people",
            "properties": [
                {
                    "name": "managerInfo",
                    "type": "string",
                    "personEntity": {
                        "entity": "customEntity",
                        "fields": [
                            {"path": "details.manager.name", "source": {"csvHeaders": ["Manager"]}},
                            {"path": "details.manager.email", "source": {"csvHeaders": ["Manager Email"]}},
                        ],
                    },
                },
                {
                    "name": "titleInfo",
                    "type": "string",
                    "personEntity": {
                        "entity": "customEntity",
                        "fields": [{"path": "details.title", "source": {"csvHeaders": ["Title"]}}],
                    },
                },
            ],
        }
    )

    generator = Generator.from_config(GeneratorConfig(targets=["typescript"]))
    result = generator.generate(schema)

    print("=== Derived Types ===\n")
    for derived in result.bundle.derived:
        print(f"{derived.name}: {', '.join(derived.field_names())}")
    print()

    print("=== TypeScript Declarations (derived only) ===\n")
    for block in result.declarations["typescript"].split("\n\n"):
        if block.startswith("export type CustomEntity"):
            print(block)
            print()

    print("=== managerInfo ===\n")
    print(result.expression("typescript", "managerInfo"))


if __name__ == "__main__":
    main()
