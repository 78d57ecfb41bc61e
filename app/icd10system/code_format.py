# app/icd10system/code_format.py
import re

# Letter + 2 digits + optional decimal with up to 4 digits, e.g. A00, E11.9, J45.909
ICD10_CODE_PATTERN = re.compile(r"^[A-Z][0-9]{2}(\.[0-9]{1,4})?$")


def validate_code_format(code: str) -> bool:
    return bool(code) and ICD10_CODE_PATTERN.match(code) is not None


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()
