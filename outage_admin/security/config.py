"""
Route security policy loaded from ``config/security_config.yaml``.

Each rule names a path (literal, or with ``{param}`` segments) and the HTTP
methods it covers. Lookup order for a request:

1. a rule whose literal path equals the request path,
2. the first templated rule (file order) whose pattern matches,
3. the ``default`` block.

A (path, method) pair may appear in only one rule; a second one is a load error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import AfterValidator, BaseModel, Field, field_validator

from outage_admin.session_auth import Role

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})

_PARAM_SEGMENT = re.compile(r"\{[^/]+\}")


def _known_roles(roles: list[str]) -> list[str]:
    unknown = [r for r in roles if Role.parse(r) is Role.UNKNOWN]
    if unknown:
        raise ValueError(f"Unknown role(s) in security config: {unknown}")
    return roles


RoleList = Annotated[list[str], AfterValidator(_known_roles)]


class AuthConfig(BaseModel):
    authorization_header: str = "Authorization"
    bearer_prefix: str = "Bearer"


class DefaultRule(BaseModel):
    auth_required: bool = True
    required_roles: RoleList = Field(default_factory=list)
    filter_by_work_center: bool = False


@dataclass(frozen=True)
class EffectiveRule:
    auth_required: bool
    required_roles: frozenset[str]
    filter_by_work_center: bool

    @classmethod
    def from_default(cls, default: DefaultRule) -> "EffectiveRule":
        return cls(default.auth_required, frozenset(default.required_roles), default.filter_by_work_center)


class RouteRule(BaseModel):
    path: str
    methods: list[str] = Field(default_factory=lambda: ["GET"])

    auth_required: bool | None = None
    required_roles: RoleList = Field(default_factory=list)
    filter_by_work_center: bool | None = None

    @field_validator("methods")
    @classmethod
    def _upper_methods(cls, methods: list[str]) -> list[str]:
        upper = [m.upper() for m in methods]
        bad = sorted(set(upper) - HTTP_METHODS)
        if bad:
            raise ValueError(f"Unknown HTTP method(s): {bad}")
        return upper

    @property
    def is_template(self) -> bool:
        return _PARAM_SEGMENT.search(self.path) is not None

    def pattern(self) -> re.Pattern[str]:
        return re.compile("^" + _PARAM_SEGMENT.sub("[^/]+", self.path) + "$")

    def resolve(self, default: DefaultRule) -> EffectiveRule:
        # Naming roles or asking for scoping implies a signed-in caller.
        if self.auth_required is not None:
            auth_required = self.auth_required
        else:
            auth_required = default.auth_required or bool(self.required_roles) or bool(self.filter_by_work_center)

        scoped = default.filter_by_work_center if self.filter_by_work_center is None else self.filter_by_work_center
        return EffectiveRule(
            auth_required=auth_required,
            required_roles=frozenset(self.required_roles or default.required_roles),
            filter_by_work_center=scoped,
        )


class SecurityConfigModel(BaseModel):
    auth: AuthConfig = Field(default_factory=AuthConfig)
    default: DefaultRule = Field(default_factory=DefaultRule)
    routes: list[RouteRule] = Field(default_factory=list)


class SecurityConfig:
    def __init__(self, model: SecurityConfigModel):
        self.model = model
        self._fallback = EffectiveRule.from_default(model.default)

        self._literal: dict[tuple[str, str], EffectiveRule] = {}
        self._templated: list[tuple[re.Pattern[str], frozenset[str], EffectiveRule]] = []
        seen: set[tuple[str, str]] = set()

        for rule in model.routes:
            for method in rule.methods:
                key = (rule.path, method)
                if key in seen:
                    raise ValueError(f"Duplicate security rule for {method} {rule.path}")
                seen.add(key)

            effective = rule.resolve(model.default)
            if rule.is_template:
                self._templated.append((rule.pattern(), frozenset(rule.methods), effective))
            else:
                self._literal.update({(rule.path, m): effective for m in rule.methods})

    @property
    def auth(self) -> AuthConfig:
        return self.model.auth

    def match(self, path: str, method: str) -> EffectiveRule:
        method = method.upper()
        found = self._literal.get((path, method))
        if found is not None:
            return found

        for pattern, methods, effective in self._templated:
            if method in methods and pattern.match(path):
                return effective
        return self._fallback


def load_security_config(path: Path) -> SecurityConfig:
    raw: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}

    if "security" not in raw:
        raise ValueError(f"Missing top-level 'security' key in config: {path}")

    return SecurityConfig(SecurityConfigModel.model_validate(raw["security"]))
