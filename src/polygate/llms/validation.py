from __future__ import annotations

"""
Admission checks run against a model's capability descriptor before any
adapter is invoked.
"""

from typing import Sequence

from .errors import ValidationError, ValidationKind
from .types import CapabilityDescriptor, ImageShape, Message, Provider


def validate_request(
    descriptor: CapabilityDescriptor,
    messages: Sequence[Message],
    control_value: str | None = None,
) -> None:
    """
    Accept the request or raise `ValidationError` naming the first problem.

    Checks run in a fixed order: control value, roles, image shape.
    """
    _validate_control_value(descriptor, control_value)
    _validate_roles(descriptor, messages)
    _validate_images(descriptor, messages)


def _validate_control_value(
    descriptor: CapabilityDescriptor, control_value: str | None
) -> None:
    if control_value is None:
        return

    allowed = descriptor.control_values_allowed
    if allowed is None or control_value not in allowed:
        accepted = ", ".join(sorted(allowed)) if allowed else "none"
        raise ValidationError(
            ValidationKind.CONTROL_VALUE,
            f"control value '{control_value}' is not authorized "
            f"(accepted: {accepted})",
        )


def _validate_roles(descriptor: CapabilityDescriptor, messages: Sequence[Message]) -> None:
    if not messages:
        raise ValidationError(ValidationKind.ROLE, "at least one message is required")

    allowed = descriptor.roles_allowed
    if allowed is None:
        return

    for idx, message in enumerate(messages):
        if message.role not in allowed:
            raise ValidationError(
                ValidationKind.ROLE,
                f"messages[{idx}].role '{message.role}' is not authorized "
                f"(accepted: {', '.join(sorted(allowed))})",
            )


def _validate_images(descriptor: CapabilityDescriptor, messages: Sequence[Message]) -> None:
    for idx, message in enumerate(messages):
        image = message.input_image
        if image is None:
            continue

        if descriptor.provider is Provider.REPLICATE and descriptor.image_field_name is None:
            raise ValidationError(
                ValidationKind.IMAGE_SHAPE,
                f"messages[{idx}] carries an image but the model accepts no image input",
            )

        if descriptor.image_shape is ImageShape.SINGLE and not isinstance(image, str):
            raise ValidationError(
                ValidationKind.IMAGE_SHAPE,
                f"messages[{idx}]: model expects a single image, "
                "but received a list of images",
            )
        if descriptor.image_shape is ImageShape.LIST and isinstance(image, str):
            raise ValidationError(
                ValidationKind.IMAGE_SHAPE,
                f"messages[{idx}]: model expects a list of images, "
                "but received a single image",
            )
