# swz_PowerEditor/core/model.py
from __future__ import annotations
from dataclasses import dataclass, field, make_dataclass, replace
from typing import Optional
import json
import logging

from .errors import PowerDecodeError
from .normalize import (
    TEXT, INTEGER, FLOAT, BOOLEAN, ENUM,
    FieldKind, BoolLiterals, DEFAULT_BOOL_LITERALS, coerce_value,
)

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldSpec:
    column: str        # name in the canonical header, e.g. CastGfx.AnimScale
    attr: str          # python attribute on Power, e.g. cast_gfx_anim_scale
    kind: FieldKind


# Canonical column order of a powerTypes file. Decode and encode both walk this table.
POWER_SCHEMA: tuple[FieldSpec, ...] = (
    FieldSpec("PowerName",                   "power_name",                            TEXT),
    FieldSpec("PowerID",                     "power_id",                              INTEGER),
    FieldSpec("OrderID",                     "order_id",                              INTEGER),
    FieldSpec("DevNotes",                    "dev_notes",                             TEXT),
    FieldSpec("MissionTags",                 "mission_tags",                          TEXT),
    FieldSpec("Priority",                    "priority",                              INTEGER),
    FieldSpec("CastSoundEvent",              "cast_sound_event",                      TEXT),
    FieldSpec("HitSoundEvent",               "hit_sound_event",                       TEXT),
    FieldSpec("ItemHitSoundEvent",           "item_hit_sound_event",                  TEXT),
    FieldSpec("TargetMethod",                "target_method",                         ENUM),
    FieldSpec("ParentItem",                  "parent_item",                           TEXT),
    FieldSpec("OriginPower",                 "origin_power",                          TEXT),
    FieldSpec("IsAirPower",                  "is_air_power",                          BOOLEAN),
    FieldSpec("IsSignature",                 "is_signature",                          BOOLEAN),
    FieldSpec("IsAntiair",                   "is_antiair",                            BOOLEAN),
    FieldSpec("SigModeSwapsMove",            "sig_mode_swaps_move",                   BOOLEAN),
    FieldSpec("AoERadiusX",                  "aoe_radius_x",                          TEXT),
    FieldSpec("AoERadiusY",                  "aoe_radius_y",                          TEXT),
    FieldSpec("CenterOffsetX",               "center_offset_x",                       TEXT),
    FieldSpec("CenterOffsetY",               "center_offset_y",                       TEXT),
    FieldSpec("CastImpulseX",                "cast_impulse_x",                        TEXT),
    FieldSpec("CastImpulseY",                "cast_impulse_y",                        TEXT),
    FieldSpec("FireImpulseX",                "fire_impulse_x",                        TEXT),
    FieldSpec("FireImpulseY",                "fire_impulse_y",                        TEXT),
    FieldSpec("FireImpulseMaxX",             "fire_impulse_max_x",                    TEXT),
    FieldSpec("ImpulseMaxOnDCOnly",          "impulse_max_on_dc_only",                BOOLEAN),
    FieldSpec("SpeedLimit",                  "speed_limit",                           TEXT),
    FieldSpec("SpeedLimitY",                 "speed_limit_y",                         TEXT),
    FieldSpec("SpeedLimitAttack",            "speed_limit_attack",                    TEXT),
    FieldSpec("SpeedLimitBackward",          "speed_limit_backward",                  TEXT),
    FieldSpec("SpeedLimitAttackBackward",    "speed_limit_attack_backward",           TEXT),
    FieldSpec("SelfImpulseOnHit",            "self_impulse_on_hit",                   TEXT),
    FieldSpec("EndOnHit",                    "end_on_hit",                            BOOLEAN),
    FieldSpec("CancelGravity",               "cancel_gravity",                        BOOLEAN),
    FieldSpec("WallCancel",                  "wall_cancel",                           BOOLEAN),
    FieldSpec("AllowMove",                   "allow_move",                            BOOLEAN),
    FieldSpec("AllowRecoverMove",            "allow_recover_move",                    BOOLEAN),
    FieldSpec("AllowJumpDuringRecover",      "allow_jump_during_recover",             BOOLEAN),
    FieldSpec("AllowLeaveGround",            "allow_leave_ground",                    BOOLEAN),
    FieldSpec("AllowHitOnZeroDamage",        "allow_hit_on_zero_damage",              BOOLEAN),
    FieldSpec("AccelMult",                   "accel_mult",                            FLOAT),
    FieldSpec("BackwardAccelMult",           "backward_accel_mult",                   FLOAT),
    FieldSpec("TurnOffDampening",            "turn_off_dampening",                    BOOLEAN),
    FieldSpec("KeepGroundFriction",          "keep_ground_friction",                  BOOLEAN),
    FieldSpec("IgnoreGroundRestrict",        "ignore_ground_restrict",                BOOLEAN),
    FieldSpec("DoNotBounceOffNoSlideCeiling", "do_not_bounce_off_no_slide_ceiling",    BOOLEAN),
    FieldSpec("NoSlideCeilingBuffer",        "no_slide_ceiling_buffer",               TEXT),
    FieldSpec("CastAnim",                    "cast_anim",                             TEXT),
    FieldSpec("Hurtbox",                     "hurtbox",                               TEXT),
    FieldSpec("CastTime",                    "cast_time",                             TEXT),
    FieldSpec("FixedRecoverTime",            "fixed_recover_time",                    TEXT),
    FieldSpec("RecoverTime",                 "recover_time",                          TEXT),
    FieldSpec("AntigravTime",                "antigrav_time",                         TEXT),
    FieldSpec("GCancelTime",                 "g_cancel_time",                         TEXT),
    FieldSpec("IgnoreForcedFallTime",        "ignore_forced_fall_time",               TEXT),
    FieldSpec("ShowCloudTime",               "show_cloud_time",                       TEXT),
    FieldSpec("CooldownTime",                "cooldown_time",                         TEXT),
    FieldSpec("IgnoreCDOverride",            "ignore_cd_override",                    BOOLEAN),
    FieldSpec("OnHitCooldownTime",           "on_hit_cooldown_time",                  TEXT),
    FieldSpec("ShakeTime",                   "shake_time",                            TEXT),
    FieldSpec("DisableShake",                "disable_shake",                         BOOLEAN),
    FieldSpec("OnlyShakeOnce",               "only_shake_once",                       BOOLEAN),
    FieldSpec("ShakeAllCams",                "shake_all_cams",                        BOOLEAN),
    FieldSpec("FixedMinChargeTime",          "fixed_min_charge_time",                 TEXT),
    FieldSpec("MinCancelTime",               "min_cancel_time",                       TEXT),
    FieldSpec("LoseInvulnTime",              "lose_invuln_time",                      TEXT),
    FieldSpec("BaseDamage",                  "base_damage",                           TEXT),
    FieldSpec("VariableImpulse",             "variable_impulse",                      TEXT),
    FieldSpec("FixedImpulse",                "fixed_impulse",                         TEXT),
    FieldSpec("MinimumImpulse",              "minimum_impulse",                       TEXT),
    FieldSpec("PostHitDamageMultiplier",     "post_hit_damage_multiplier",            TEXT),
    FieldSpec("PostHitImpulseMultiplier",    "post_hit_impulse_multiplier",           TEXT),
    FieldSpec("ImpulseOffsetX",              "impulse_offset_x",                      TEXT),
    FieldSpec("ImpulseOffsetY",              "impulse_offset_y",                      TEXT),
    FieldSpec("ImpulseOffsetMaxX",           "impulse_offset_max_x",                  TEXT),
    FieldSpec("ImpulseToPoint",              "impulse_to_point",                      BOOLEAN),
    FieldSpec("ToPointChangeX",              "to_point_change_x",                     TEXT),
    FieldSpec("ToPointChangeY",              "to_point_change_y",                     TEXT),
    FieldSpec("ToPointChangeDmg",            "to_point_change_dmg",                   TEXT),
    FieldSpec("LockTo45Degrees",             "lock_to_45_degrees",                    BOOLEAN),
    FieldSpec("DownwardForceMult",           "downward_force_mult",                   FLOAT),
    FieldSpec("MirrorImpulseOffset",         "mirror_impulse_offset",                 BOOLEAN),
    FieldSpec("MirrorOffsetCenter",          "mirror_offset_center",                  BOOLEAN),
    FieldSpec("IgnoreStrength",              "ignore_strength",                       BOOLEAN),
    FieldSpec("AcceptInput",                 "accept_input",                          TEXT),
    FieldSpec("HeldDirOffsets",              "held_dir_offsets",                      TEXT),
    FieldSpec("DIMaxAngle",                  "di_max_angle",                          TEXT),
    FieldSpec("ImpulseOnHeavy",              "impulse_on_heavy",                      BOOLEAN),
    FieldSpec("ItemSpeedDamage",             "item_speed_damage",                     TEXT),
    FieldSpec("ItemSpeedImpulse",            "item_speed_impulse",                    TEXT),
    FieldSpec("ItemHitElasticity",           "item_hit_elasticity",                   FLOAT),
    FieldSpec("AirTimeMultOnly",             "air_time_mult_only",                    BOOLEAN),
    FieldSpec("IsMultihit",                  "is_multihit",                           BOOLEAN),
    FieldSpec("MinTimeBetweenHits",          "min_time_between_hits",                 TEXT),
    FieldSpec("InheritAlreadyHit",           "inherit_already_hit",                   BOOLEAN),
    FieldSpec("InterruptThreshold",          "interrupt_threshold",                   TEXT),
    FieldSpec("CanDamageEveryone",           "can_damage_everyone",                   BOOLEAN),
    FieldSpec("CanAssist",                   "can_assist",                            BOOLEAN),
    FieldSpec("ConsumesWeapon",              "consumes_weapon",                       BOOLEAN),
    FieldSpec("FixedStunTime",               "fixed_stun_time",                       TEXT),
    FieldSpec("HoldHitEnts",                 "hold_hit_ents",                         BOOLEAN),
    FieldSpec("HoldOffsetX",                 "hold_offset_x",                         TEXT),
    FieldSpec("HoldOffsetY",                 "hold_offset_y",                         TEXT),
    FieldSpec("UpdateHeldEnts",              "update_held_ents",                      BOOLEAN),
    FieldSpec("DestroysItemOnHit",           "destroys_item_on_hit",                  BOOLEAN),
    FieldSpec("GrabInterpolateTime",         "grab_interpolate_time",                 TEXT),
    FieldSpec("GrabAnim",                    "grab_anim",                             TEXT),
    FieldSpec("GrabAnimSpeed",               "grab_anim_speed",                       FLOAT),
    FieldSpec("GrabForceUpdate",             "grab_force_update",                     BOOLEAN),
    FieldSpec("Uninterruptable",             "uninterruptable",                       BOOLEAN),
    FieldSpec("CanChangeDirection",          "can_change_direction",                  BOOLEAN),
    FieldSpec("ComboName",                   "combo_name",                            TEXT),
    FieldSpec("ComboOverrideIfHit",          "combo_override_if_hit",                 TEXT),
    FieldSpec("ComboOverrideIfRelease",      "combo_override_if_release",             TEXT),
    FieldSpec("ComboOverrideIfWall",         "combo_override_if_wall",                TEXT),
    FieldSpec("ComboOverrideIfButton",       "combo_override_if_button",              TEXT),
    FieldSpec("OriginOverrideIfInMode",      "origin_override_if_in_mode",            TEXT),
    FieldSpec("ComboOverrideIfDir",          "combo_override_if_dir",                 TEXT),
    FieldSpec("ComboOverrideIfInterrupt",    "combo_override_if_interrupt",           TEXT),
    FieldSpec("IgnoreButtonOnHit",           "ignore_button_on_hit",                  BOOLEAN),
    FieldSpec("IgnoreButtonOnMiss",          "ignore_button_on_miss",                 BOOLEAN),
    FieldSpec("ComboUseSameTargetPos",       "combo_use_same_target_pos",             BOOLEAN),
    FieldSpec("UseCollisionAsTargetPos",     "use_collision_as_target_pos",           BOOLEAN),
    FieldSpec("ComboUseTargetAsSource",      "combo_use_target_as_source",            BOOLEAN),
    FieldSpec("ComboUseSameSourcePos",       "combo_use_same_source_pos",             BOOLEAN),
    FieldSpec("BGPowerOnFire",               "bg_power_on_fire",                      TEXT),
    FieldSpec("BGCastIdx",                   "bg_cast_idx",                           INTEGER),
    FieldSpec("AllowBGInterrupt",            "allow_bg_interrupt",                    BOOLEAN),
    FieldSpec("PopulateActivePowerHits",     "populate_active_power_hits",            BOOLEAN),
    FieldSpec("PopulateBGHits",              "populate_bg_hits",                      BOOLEAN),
    FieldSpec("ExhaustedVersion",            "exhausted_version",                     TEXT),
    FieldSpec("GCVersion",                   "gc_version",                            TEXT),
    FieldSpec("MomentumVersion",             "momentum_version",                      TEXT),
    FieldSpec("TeamTauntPower",              "team_taunt_power",                      BOOLEAN),
    FieldSpec("AnimLayer",                   "anim_layer",                            ENUM),
    FieldSpec("FXLayer",                     "fx_layer",                              ENUM),
    FieldSpec("IsWorldCastGfx",              "is_world_cast_gfx",                     BOOLEAN),
    FieldSpec("CustomArtCastGfx",            "custom_art_cast_gfx",                   TEXT),
    FieldSpec("DelayCastGfxToFirstFire",     "delay_cast_gfx_to_first_fire",          BOOLEAN),
    FieldSpec("DelayCastGFXCleanUp",         "delay_cast_gfx_clean_up",               BOOLEAN),
    FieldSpec("CastAnimSource",              "cast_anim_source",                      ENUM),
    FieldSpec("DoNotSendSync",               "do_not_send_sync",                      BOOLEAN),
    FieldSpec("IsThrow",                     "is_throw",                              BOOLEAN),
    FieldSpec("CannotAttackAroundCorners",   "cannot_attack_around_corners",          BOOLEAN),
    FieldSpec("ForceHitThroughSoftPlat",     "force_hit_through_soft_plat",           BOOLEAN),
    FieldSpec("ForceFaceRight",              "force_face_right",                      BOOLEAN),
    FieldSpec("CollisionPowerOffSetX",       "collision_power_off_set_x",             TEXT),
    FieldSpec("CollisionPowerOffSetY",       "collision_power_off_set_y",             TEXT),
    FieldSpec("CastGfx.AnimFile",            "cast_gfx_anim_file",                    TEXT),
    FieldSpec("CastGfx.AnimClass",           "cast_gfx_anim_class",                   TEXT),
    FieldSpec("CastGfx.AnimScale",           "cast_gfx_anim_scale",                   FLOAT),
    FieldSpec("CastGfx.FireAndForget",       "cast_gfx_fire_and_forget",              BOOLEAN),
    FieldSpec("CastGfx.MoveAnimSpeed",       "cast_gfx_move_anim_speed",              FLOAT),
    FieldSpec("CastGfx.FlipAnim",            "cast_gfx_flip_anim",                    BOOLEAN),
    FieldSpec("CastGfx.Tint",                "cast_gfx_tint",                         TEXT),
    FieldSpec("CastGfxRotation",             "cast_gfx_rotation",                     TEXT),
    FieldSpec("IsWorldFireGfx",              "is_world_fire_gfx",                     BOOLEAN),
    FieldSpec("IsAttackFireGfx",             "is_attack_fire_gfx",                    BOOLEAN),
    FieldSpec("CustomArtFireGfx",            "custom_art_fire_gfx",                   TEXT),
    FieldSpec("FireAnimSource",              "fire_anim_source",                      ENUM),
    FieldSpec("FireGfx.AnimFile",            "fire_gfx_anim_file",                    TEXT),
    FieldSpec("FireGfx.AnimClass",           "fire_gfx_anim_class",                   TEXT),
    FieldSpec("FireGfx.AnimScale",           "fire_gfx_anim_scale",                   FLOAT),
    FieldSpec("FireGfx.FireAndForget",       "fire_gfx_fire_and_forget",              BOOLEAN),
    FieldSpec("FireGfx.MoveAnimSpeed",       "fire_gfx_move_anim_speed",              FLOAT),
    FieldSpec("FireGfx.FlipAnim",            "fire_gfx_flip_anim",                    BOOLEAN),
    FieldSpec("FireGfx.Tint",                "fire_gfx_tint",                         TEXT),
    FieldSpec("FireGfxRotation",             "fire_gfx_rotation",                     TEXT),
    FieldSpec("IsWorldHitGfx",               "is_world_hit_gfx",                      BOOLEAN),
    FieldSpec("OnlyOnceHitGfx",              "only_once_hit_gfx",                     BOOLEAN),
    FieldSpec("OwnerFacingHitGfx",           "owner_facing_hit_gfx",                  BOOLEAN),
    FieldSpec("PlayHitGfxBehind",            "play_hit_gfx_behind",                   BOOLEAN),
    FieldSpec("HitAnimSource",               "hit_anim_source",                       ENUM),
    FieldSpec("HitReactAnim",                "hit_react_anim",                        TEXT),
    FieldSpec("HitGfx.AnimFile",             "hit_gfx_anim_file",                     TEXT),
    FieldSpec("HitGfx.AnimClass",            "hit_gfx_anim_class",                    TEXT),
    FieldSpec("HitGfx.AnimScale",            "hit_gfx_anim_scale",                    FLOAT),
    FieldSpec("HitGfx.FireAndForget",        "hit_gfx_fire_and_forget",               BOOLEAN),
    FieldSpec("HitGfx.Tint",                 "hit_gfx_tint",                          TEXT),
)

HEADER_COLUMNS: tuple[str, ...] = tuple(f.column for f in POWER_SCHEMA)
SCHEMA_BY_ATTR: dict[str, FieldSpec] = {f.attr: f for f in POWER_SCHEMA}
SCHEMA_BY_COLUMN: dict[str, FieldSpec] = {f.column: f for f in POWER_SCHEMA}

_PY_TYPES = {TEXT: str, ENUM: str, INTEGER: int, FLOAT: float, BOOLEAN: bool}

Power = make_dataclass(
    "Power",
    [(f.attr, Optional[_PY_TYPES[f.kind]], field(default=None)) for f in POWER_SCHEMA]
    # source text of typed cells whose canonical form differs, keyed by attr
    + [("raw_cells", Optional[dict], field(default=None, compare=False, repr=False))],
)
Power.__module__ = __name__
Power.__doc__ = "One row of a powerTypes file; every field is optional (None = empty cell)."


def header_line(delimiter: str = ",") -> str:
    return delimiter.join(HEADER_COLUMNS)


def empty_power() -> Power:
    return Power()


def copy_power(power: Power) -> Power:
    return replace(power)


def power_to_dict(power: Power) -> dict:
    return {f.attr: getattr(power, f.attr) for f in POWER_SCHEMA}


def power_from_dict(data: dict, literals: BoolLiterals = DEFAULT_BOOL_LITERALS) -> Power:
    """
    Build a Power from an attribute-keyed mapping (clipboard JSON, GUI form).
    Values are coerced to each field's type; unknown keys are ignored.
    """
    values = {}
    for key, value in data.items():
        spec = SCHEMA_BY_ATTR.get(key)
        if spec is None:
            _LOG.debug("ignoring unknown power property %r", key)
            continue
        try:
            values[spec.attr] = coerce_value(spec.kind, value, literals)
        except ValueError as e:
            raise PowerDecodeError(f"Invalid value for {spec.attr}: {e}") from e
    return Power(**values)


def power_to_json(power: Power) -> str:
    return json.dumps(power_to_dict(power), indent=2, ensure_ascii=False)


def power_from_json(text: str, literals: BoolLiterals = DEFAULT_BOOL_LITERALS) -> Power:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise PowerDecodeError(f"Invalid power properties: {e}") from e
    if not isinstance(data, dict):
        raise PowerDecodeError("Invalid power properties: expected a JSON object.")
    return power_from_dict(data, literals)
