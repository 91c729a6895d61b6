"""Input validation for reports and risk assessment requests"""

import json
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
from jsonschema import Draft7Validator

from healthwatch.config import settings
from healthwatch.exceptions import ValidationError


class InputType(Enum):
    """Validated input kinds; each has a <value>_schema.json file"""
    REPORT = "report"
    RISK_INPUT = "risk_input"


@dataclass
class ValidationResult:
    """Result of input validation"""
    is_valid: bool
    errors: List[str]
    warnings: List[str]
    input_type: str

    def to_dict(self) -> Dict:
        """Convert validation result to dictionary"""
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "input_type": self.input_type
        }


class ReportValidator:
    """
    Validates submissions against the JSON schemas shipped with the package.

    Schema violations are errors. Readings that pass the schema but indicate
    unsafe water, or a report without symptoms, are warnings.
    """

    def __init__(
        self,
        schema_dir: Optional[Path] = None,
        ph_safe_min: Optional[float] = None,
        ph_safe_max: Optional[float] = None,
        turbidity_limit: Optional[float] = None
    ):
        """
        Initialize ReportValidator.

        Args:
            schema_dir: Directory containing JSON schema files.
                       Defaults to healthwatch/ingestion/schemas/
            ph_safe_min: Lowest safe pH (defaults to configuration)
            ph_safe_max: Highest safe pH (defaults to configuration)
            turbidity_limit: Highest safe turbidity in NTU (defaults to configuration)
        """
        if schema_dir is None:
            schema_dir = Path(__file__).parent / "schemas"

        self.schema_dir = Path(schema_dir)
        self.ph_safe_min = ph_safe_min if ph_safe_min is not None else settings.triage.ph_safe_min
        self.ph_safe_max = ph_safe_max if ph_safe_max is not None else settings.triage.ph_safe_max
        self.turbidity_limit = (
            turbidity_limit if turbidity_limit is not None
            else settings.triage.turbidity_limit_ntu
        )
        self._schema_cache: Dict[str, Dict] = {}
        self._validator_cache: Dict[str, Draft7Validator] = {}

        for input_type in InputType:
            self.get_schema(input_type.value)

    def get_schema(self, input_type: str) -> Dict:
        """
        Load and cache the JSON schema for an input type.

        Raises:
            ValidationError: If the schema file is missing or invalid
        """
        if input_type in self._schema_cache:
            return self._schema_cache[input_type]

        schema_file = self.schema_dir / f"{input_type}_schema.json"

        if not schema_file.exists():
            raise ValidationError(
                f"Schema file not found for input type: {input_type}",
                details={"schema_file": str(schema_file)}
            )

        try:
            with open(schema_file, 'r', encoding='utf-8') as f:
                schema = json.load(f)

            Draft7Validator.check_schema(schema)

            self._schema_cache[input_type] = schema
            self._validator_cache[input_type] = Draft7Validator(schema)

            return schema

        except json.JSONDecodeError as e:
            raise ValidationError(
                f"Invalid JSON in schema file: {schema_file}",
                details={"error": str(e)}
            )
        except jsonschema.SchemaError as e:
            raise ValidationError(
                f"Invalid JSON schema for {input_type}",
                details={"error": str(e)}
            )

    def _validate_against_schema(self, data: Any, input_type: str) -> ValidationResult:
        validator = self._validator_cache[input_type]
        errors = []
        warnings: List[str] = []

        for error in sorted(validator.iter_errors(data), key=lambda e: list(e.path)):
            path = ".".join(str(p) for p in error.path) if error.path else "root"
            errors.append(f"Field '{path}': {error.message}")

        errors.extend(self._non_finite_errors(data))

        if not errors and input_type == InputType.REPORT.value:
            self._check_water_quality_warnings(data, warnings)

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            input_type=input_type
        )

    @staticmethod
    def _non_finite_errors(data: Any) -> List[str]:
        # NaN slips past minimum/maximum since every comparison with it is false
        if not isinstance(data, dict):
            return []
        return [
            f"Field '{key}': {value} is not a finite number"
            for key, value in data.items()
            if isinstance(value, float) and not math.isfinite(value)
        ]

    def _check_water_quality_warnings(self, data: Dict, warnings: List[str]) -> None:
        if not data.get("symptoms"):
            warnings.append("Report lists no symptoms")

        ph = data.get("ph")
        if ph is not None and not self.ph_safe_min <= ph <= self.ph_safe_max:
            warnings.append(
                f"Unsafe pH: {ph} (safe range {self.ph_safe_min}-{self.ph_safe_max})"
            )

        turbidity = data.get("turbidity")
        if turbidity is not None and turbidity > self.turbidity_limit:
            warnings.append(
                f"High turbidity: {turbidity} NTU (limit {self.turbidity_limit})"
            )

    def validate_report(self, data: Dict) -> ValidationResult:
        """Validate a report submission."""
        return self._validate_against_schema(data, InputType.REPORT.value)

    def validate_risk_input(self, data: Dict) -> ValidationResult:
        """Validate a risk assessment request body."""
        return self._validate_against_schema(data, InputType.RISK_INPUT.value)

    def validate(self, data: Dict, input_type: str) -> ValidationResult:
        """
        Generic validation method that routes to specific validator.

        Raises:
            ValidationError: If input_type is invalid
        """
        try:
            input_enum = InputType(input_type)
        except ValueError:
            raise ValidationError(
                f"Invalid input type: {input_type}",
                details={"valid_types": [t.value for t in InputType]}
            )
        return self._validate_against_schema(data, input_enum.value)

    def require_valid(self, data: Dict, input_type: str) -> ValidationResult:
        """
        Validate and raise on failure.

        Raises:
            ValidationError: With the validation result as details
        """
        result = self.validate(data, input_type)
        if not result.is_valid:
            raise ValidationError(
                f"{input_type.replace('_', ' ').capitalize()} validation failed: "
                f"{'; '.join(result.errors)}",
                details=result.to_dict()
            )
        return result
