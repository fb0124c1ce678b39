from marshmallow import fields, validate
from confreg import ma


class TeamCreateSchema(ma.Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    description = fields.Str(load_default=None, allow_none=True)
    capacity = fields.Int(load_default=None, allow_none=True,
                          validate=validate.Range(min=1))
    event_config_id = fields.Str(load_default=None, allow_none=True)
    leader_id = fields.Str(load_default=None, allow_none=True)
    sub_leader_id = fields.Str(load_default=None, allow_none=True)


team_create_schema = TeamCreateSchema()


class BulkAssignSchema(ma.Schema):
    registrant_ids = fields.List(fields.Str(), required=True,
                                 validate=validate.Length(min=1))
    team_id = fields.Str(required=True)
    notes = fields.Str(load_default=None, allow_none=True)


bulk_assign_schema = BulkAssignSchema()


class AssignTeamSchema(ma.Schema):
    team_id = fields.Str(required=True)


assign_team_schema = AssignTeamSchema()
