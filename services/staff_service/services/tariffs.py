"""Tariff validation and submission payloads."""

from libs.common.errors import ValidationFailed
from services.staff_service.models import PaymentType
from services.staff_service.schemas.tariff import TariffDraft, TariffPayload
from services.staff_service.services.access_scope import AccessScopeSelector


def clean_features(features: list[str]) -> list[str]:
    """Trimmed, non-empty, first occurrence kept."""
    return list(dict.fromkeys(f.strip() for f in features if f and f.strip()))


def validate_tariff(draft: TariffDraft, selector: AccessScopeSelector) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not draft.name.strip():
        errors["name"] = "name_required"
    errors.update(selector.validate())
    if not draft.price or draft.price <= 0:
        errors["price"] = "price_required"
    if draft.payment_type == PaymentType.SESSION_PACK:
        if not draft.sessions_count or draft.sessions_count <= 0:
            errors["sessions"] = "sessions_required"
        if not draft.validity_days or draft.validity_days <= 0:
            errors["validity"] = "validity_required"
    return errors


def build_tariff_payload(
    draft: TariffDraft, selector: AccessScopeSelector
) -> TariffPayload:
    """Validate and assemble the tariff for submission.

    The package type is derived from the selection at this point, never
    taken from earlier state.

    Raises:
        ValidationFailed: with every field error found.
    """
    errors = validate_tariff(draft, selector)
    if errors:
        raise ValidationFailed(errors)

    is_pack = draft.payment_type == PaymentType.SESSION_PACK
    return TariffPayload(
        name=draft.name.strip(),
        type=selector.package_type(),
        payment_type=draft.payment_type,
        price=draft.price,
        sessions_count=draft.sessions_count if is_pack else None,
        validity_days=draft.validity_days if is_pack else None,
        features=clean_features(draft.features),
        active=draft.active,
        **selector.as_lists(),
    )
