from .schema import EnvVariable


def describe_variable(variable: EnvVariable) -> str:
    """Markdown summary of a variable, suitable for hovers or generated docs."""
    markdown = f"**Type:** `{variable.value_type.value}`\n\n"

    if variable.description:
        markdown += f"**Description:** {variable.description}\n\n"
    if variable.default is not None:
        markdown += f"**Default:** `{variable.default}`\n\n"

    markdown += f"**Required:** `{'false' if variable.optional else 'true'}`\n"

    if variable.group:
        markdown += f"\n**Group:** `{variable.group}`"
    if variable.env_type:
        markdown += f"\n**Env type:** `{variable.env_type.value}`"
    return markdown
