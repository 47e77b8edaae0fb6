from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from boboparty.models.cart import CartLineInput, CartLineUpdate

_QUANTITY = validate.Range(min=1, error="Quantity must be at least {min}.")


def _required(message: str) -> dict:
    return {"required": message, "null": message}


class _BodySchema(Schema):
    class Meta:
        unknown = EXCLUDE


class CartLineSchema(_BodySchema):
    merchandise_id = fields.Str(
        required=True,
        data_key="merchandiseId",
        validate=validate.Length(min=1, error="Missing merchandiseId."),
        error_messages=_required("Missing merchandiseId."),
    )
    quantity = fields.Int(required=True, strict=True, validate=_QUANTITY, error_messages=_required("Missing quantity."))

    @post_load
    def make_input(self, data, **kwargs):
        return CartLineInput(**data)


class CartLineUpdateSchema(_BodySchema):
    line_id = fields.Str(
        required=True,
        data_key="id",
        validate=validate.Length(min=1, error="Missing line id."),
        error_messages=_required("Missing line id."),
    )
    # Zero is rejected: removing a line goes through DELETE.
    quantity = fields.Int(required=True, strict=True, validate=_QUANTITY, error_messages=_required("Missing quantity."))

    @post_load
    def make_update(self, data, **kwargs):
        return CartLineUpdate(**data)


class AddCartLinesSchema(_BodySchema):
    """POST body. Both fields optional here; the route decides what is missing."""
    cart_id = fields.Str(data_key="cartId", load_default=None, allow_none=True)
    lines = fields.List(fields.Nested(CartLineSchema), load_default=None, allow_none=True)


class UpdateCartLinesSchema(_BodySchema):
    cart_id = fields.Str(
        required=True,
        data_key="cartId",
        validate=validate.Length(min=1, error="Missing cartId."),
        error_messages=_required("Missing cartId."),
    )
    line_updates = fields.List(
        fields.Nested(CartLineUpdateSchema),
        required=True,
        data_key="lineUpdates",
        validate=validate.Length(min=1, error="Missing line updates."),
        error_messages=_required("Missing line updates."),
    )


class RemoveCartLinesSchema(_BodySchema):
    cart_id = fields.Str(
        required=True,
        data_key="cartId",
        validate=validate.Length(min=1, error="Missing cartId."),
        error_messages=_required("Missing cartId."),
    )
    line_ids = fields.List(
        fields.Str(validate=validate.Length(min=1, error="Line ids cannot be empty.")),
        required=True,
        data_key="lineIds",
        validate=validate.Length(min=1, error="Missing lineIds."),
        error_messages=_required("Missing lineIds."),
    )
