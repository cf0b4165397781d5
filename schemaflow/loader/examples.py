"""Bundled example schemas shown when no schema module can be loaded."""

from schemaflow.schema import s

ProductSchema = s.object(
    {
        "productId": s.string(),
        "name": s.string(),
        "description": s.string(),
        "price": s.number(),
    }
)

UserRole = s.enum(["admin", "user"])

UserSchema = s.object(
    {
        "role": UserRole,
        "userId": s.string(),
        "name": s.string(),
        "email": s.string().refine(lambda value: "@" in value),
        "password": s.string().refine(lambda value: len(value) >= 8),
        "products": s.array(ProductSchema),
    }
)

MasterSchema = s.object(
    {
        "user": UserSchema,
        "product": ProductSchema,
    }
)
