from marshmallow import fields, validate
from confreg import ma
from confreg.models.user import User, REGIONS


class UserSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = User
        load_instance = False
        # never dump the hash
        exclude = ('password_hash',)

    id = fields.Str(dump_only=True)
    email = fields.Email(dump_only=True)
    role = fields.Str(dump_only=True)
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)


user_schema = UserSchema()
users_schema = UserSchema(many=True)


class UserRegisterSchema(ma.Schema):
    email = fields.Email(required=True, validate=validate.Length(max=120))
    password = fields.Str(required=True, load_only=True,
                          validate=validate.Length(min=6))
    full_name = fields.Str(required=True, validate=validate.Length(min=1, max=120))
    region = fields.Str(load_default=None, allow_none=True,
                        validate=validate.OneOf(REGIONS))
    province = fields.Str(load_default=None, allow_none=True)
    facebook_url = fields.Str(load_default=None, allow_none=True)


user_register_schema = UserRegisterSchema()


class UserLoginSchema(ma.Schema):
    email = fields.Email(required=True)
    password = fields.Str(required=True, validate=validate.Length(min=6))


user_login_schema = UserLoginSchema()


class ProfileUpdateSchema(ma.Schema):
    full_name = fields.Str(validate=validate.Length(min=1, max=120))
    region = fields.Str(allow_none=True, validate=validate.OneOf(REGIONS))
    province = fields.Str(allow_none=True)
    facebook_url = fields.Str(allow_none=True)


profile_update_schema = ProfileUpdateSchema()
