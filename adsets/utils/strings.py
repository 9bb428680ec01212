import re


def canonical_label(label) -> str:
    """
    Returns the string form of a class label. Numeric labels read from text files come
    back as floats, so integral values are written without the fractional part: 1.0 -> '1'.
    """
    if isinstance(label, str):
        label = label.strip()
        try:
            value = float(label)
        except ValueError:
            return label
    else:
        value = float(label)
    if value.is_integer():
        return str(int(value))
    return str(label)


def subproblem_tag(normal_label: str, anomaly_label: str) -> str:
    return f"{normal_label}-{anomaly_label}"


def validate_dataset_name(dataset: str) -> None:
    if not isinstance(dataset, str) or not re.match(r"^[\w.\-]+$", dataset):
        raise ValueError(f"Invalid dataset name: {dataset!r}. Must be a non-empty directory name prefix, e.g., 'yeast'.")
