"""
Example 01: Entity Collection Expressions

This example compiles a people-connector skills property into TypeScript, C#
and Python expressions, then evaluates the Python one against a CSV row.
"""

from entity_codegen import Generator, GeneratorConfig
from entity_codegen.core.ir import ConnectorSchema
from entity_codegen.runtime import expression_namespace


def main():
    schema = ConnectorSchema.model_validate(
        {
            "contentCategory": "people",
            "properties": [
                {"name": "id", "type": "string", "source": {"csvHeaders": ["Id"]}},
                {
                    "name": "skills",
                    "type": "stringCollection",
                    "labels": ["personSkills"],
                    "personEntity": {
                        "entity": "skillProficiency",
                        "fields": [
                            {"path": "displayName", "source": {"csvHeaders": ["Skill"]}},
                            {"path": "proficiency", "source": {"csvHeaders": ["Level"]}},
                        ],
                    },
                },
            ],
        }
    )

    generator = Generator.from_config(GeneratorConfig(targets=["typescript", "csharp", "python"]))
    result = generator.generate(schema)

    print("=== Compiled Expressions ===\n")
    for target in ("typescript", "csharp"):
        print(f"--- {target} ---")
        print(result.expression(target, "skills"))
        print()

    # Bind the Python declarations next to the row helpers, then evaluate
    row = {"Id": "42", "Skill": "Python;SQL;Go", "Level": "expert"}
    namespace = expression_namespace(row)
    exec(result.declarations["python"], namespace)
    skills = eval(result.expression("python", "skills"), namespace)

    print("=== Evaluated Row ===\n")
    print(f"id: {eval(result.expression('python', 'id'), namespace)}")
    for skill in skills:
        print(f"  - {skill}")


if __name__ == "__main__":
    main()
