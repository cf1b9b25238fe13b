"""Compiled script opcodes and function argument layouts.

Statement opcodes live below 0x1000; everything from 0x1000 up is a
function call, statement-level or inside an expression. Operands of a
function call follow the layout string in FUNCTIONS, one letter each:

  o  id string      u8 length + bytes (rendered bare when it's a plain identifier)
  t  text string    u8 length + bytes (always quoted)
  b  u8             h  i16            l  i32            F  f32
  v  variable ref   V  u8 count of variable refs
  T  u8 count of text strings
"""

from dataclasses import dataclass
from enum import IntEnum


class Opcode(IntEnum):
    END = 0x0101
    SET = 0x0105
    IF = 0x0106
    ELSE = 0x0107
    ELSEIF = 0x0108
    ENDIF = 0x0109
    REFERENCE = 0x010C
    WHILE = 0x010E
    ENDWHILE = 0x0110
    RETURN = 0x0124


FUNCTION_BASE = 0x1000

# Statements that open or continue a block, mapped to the keyword they render as.
BLOCK_KEYWORDS: dict[int, str] = {
    Opcode.IF: "if",
    Opcode.ELSEIF: "elseif",
    Opcode.ELSE: "else",
    Opcode.ENDIF: "endif",
    Opcode.WHILE: "while",
    Opcode.ENDWHILE: "endwhile",
}

# Variable reference kind bytes.
LOCAL_SHORT = ord("s")
LOCAL_LONG = ord("l")
LOCAL_FLOAT = ord("f")
GLOBAL_VAR = ord("G")

# Expression-only markers.
EXPR_FUNCTION = ord("X")
EXPR_REFERENCE = ord("R")


@dataclass(frozen=True, slots=True)
class FunctionSpec:
    name: str
    layout: str = ""


FUNCTIONS: dict[int, FunctionSpec] = {
    # Statement functions
    0x1000: FunctionSpec("MessageBox", "tVT"),
    0x1001: FunctionSpec("PlaySound", "o"),
    0x1002: FunctionSpec("StartScript", "o"),
    0x1003: FunctionSpec("StopScript", "o"),
    0x1004: FunctionSpec("Journal", "ol"),
    0x1005: FunctionSpec("AddItem", "ol"),
    0x1006: FunctionSpec("RemoveItem", "ol"),
    0x1007: FunctionSpec("AddTopic", "o"),
    0x1008: FunctionSpec("Enable"),
    0x1009: FunctionSpec("Disable"),
    0x100A: FunctionSpec("Activate"),
    0x100B: FunctionSpec("PositionCell", "FFFFo"),
    0x100C: FunctionSpec("ModPCFacRep", "lo"),
    0x100D: FunctionSpec("SetHealth", "F"),
    0x100E: FunctionSpec("ModDisposition", "l"),
    0x100F: FunctionSpec("AddSpell", "o"),
    0x1010: FunctionSpec("RemoveSpell", "o"),
    0x1011: FunctionSpec("StreamMusic", "o"),
    0x1012: FunctionSpec("PlaceAtPC", "olFb"),
    0x1013: FunctionSpec("ForceGreeting"),
    0x1014: FunctionSpec("SetAngle", "oF"),
    0x1015: FunctionSpec("Say", "tt"),
    0x1016: FunctionSpec("ShowMap", "o"),
    0x1017: FunctionSpec("Lock", "h"),
    0x1018: FunctionSpec("Unlock"),
    0x1019: FunctionSpec("PlayGroup", "ob"),
    0x101A: FunctionSpec("Choice", "tb"),
    0x101B: FunctionSpec("Goodbye"),
    0x101C: FunctionSpec("SetFight", "h"),
    0x101D: FunctionSpec("ModCurrentHealth", "F"),
    0x101E: FunctionSpec("PlaySound3D", "o"),
    0x101F: FunctionSpec("Position", "FFFF"),
    0x1020: FunctionSpec("SetPos", "oF"),
    0x1021: FunctionSpec("PlaceAtMe", "olFb"),
    0x1022: FunctionSpec("PlaceItem", "oFFFF"),
    0x1023: FunctionSpec("PlaceItemCell", "ooFFFF"),
    0x1024: FunctionSpec("AITravel", "FFF"),
    0x1025: FunctionSpec("AIWander", "FFF"),
    0x1026: FunctionSpec("AIFollow", "oFFFF"),
    0x1027: FunctionSpec("AIEscort", "oFFFF"),
    0x1028: FunctionSpec("AIActivate", "o"),
    0x1029: FunctionSpec("StartCombat", "o"),
    0x102A: FunctionSpec("StopCombat"),
    0x102B: FunctionSpec("Equip", "o"),
    0x102C: FunctionSpec("Drop", "ol"),
    0x102D: FunctionSpec("Cast", "oo"),
    0x102E: FunctionSpec("Resurrect"),
    0x102F: FunctionSpec("SetScale", "F"),
    0x1030: FunctionSpec("ModScale", "F"),
    0x1031: FunctionSpec("SetDisposition", "l"),
    0x1032: FunctionSpec("SetFlee", "h"),
    0x1033: FunctionSpec("SetAlarm", "h"),
    0x1034: FunctionSpec("SetHello", "h"),
    0x1035: FunctionSpec("Move", "oF"),
    0x1036: FunctionSpec("Rotate", "oF"),
    0x1037: FunctionSpec("StopSound", "o"),
    0x1038: FunctionSpec("PCRaiseRank", "o"),
    0x1039: FunctionSpec("PCLowerRank", "o"),
    0x103A: FunctionSpec("PCJoinFaction", "o"),
    0x103B: FunctionSpec("PCExpell", "o"),
    0x103C: FunctionSpec("RemoveSoulGem", "o"),
    0x103D: FunctionSpec("SetDelete", "h"),
    0x103E: FunctionSpec("ShowRestMenu"),
    0x103F: FunctionSpec("FadeIn", "F"),
    0x1040: FunctionSpec("FadeOut", "F"),
    0x1041: FunctionSpec("DisablePlayerControls"),
    0x1042: FunctionSpec("EnablePlayerControls"),
    0x1043: FunctionSpec("SetStrength", "F"),
    0x1044: FunctionSpec("ModCurrentFatigue", "F"),
    0x1045: FunctionSpec("ModCurrentMagicka", "F"),
    # Value-returning functions, mostly seen inside expressions
    0x2000: FunctionSpec("GetJournalIndex", "o"),
    0x2001: FunctionSpec("GetItemCount", "o"),
    0x2002: FunctionSpec("OnActivate"),
    0x2003: FunctionSpec("GetDisabled"),
    0x2004: FunctionSpec("GetPCCell", "o"),
    0x2005: FunctionSpec("Random", "h"),
    0x2006: FunctionSpec("MenuMode"),
    0x2007: FunctionSpec("GetSecondsPassed"),
    0x2008: FunctionSpec("GetButtonPressed"),
    0x2009: FunctionSpec("ScriptRunning", "o"),
    0x200A: FunctionSpec("CellChanged"),
    0x200B: FunctionSpec("GetDistance", "o"),
    0x200C: FunctionSpec("GetDeadCount", "o"),
    0x200D: FunctionSpec("GetHealth"),
    0x200E: FunctionSpec("GetLocked"),
    0x200F: FunctionSpec("GetStandingPC"),
    0x2010: FunctionSpec("OnDeath"),
    0x2011: FunctionSpec("GetPCRank", "o"),
    0x2012: FunctionSpec("GetDisposition"),
    0x2013: FunctionSpec("OnPCEquip"),
    0x2014: FunctionSpec("GetPos", "o"),
    0x2015: FunctionSpec("GetAngle", "o"),
    0x2016: FunctionSpec("GetSpell", "o"),
    0x2017: FunctionSpec("GetCurrentAIPackage"),
    0x2018: FunctionSpec("GetAIPackageDone"),
    0x2019: FunctionSpec("GetTarget", "o"),
    0x201A: FunctionSpec("GetDetected", "o"),
    0x201B: FunctionSpec("GetLOS", "o"),
    0x201C: FunctionSpec("GetStrength"),
    0x201D: FunctionSpec("GetFatigue"),
    0x201E: FunctionSpec("GetMagicka"),
    0x201F: FunctionSpec("GetLevel"),
    0x2020: FunctionSpec("OnPCDrop"),
    0x2021: FunctionSpec("OnPCAdd"),
    0x2022: FunctionSpec("OnKnockout"),
    0x2023: FunctionSpec("OnMurder"),
    0x2024: FunctionSpec("GetSpellEffects", "o"),
    0x2025: FunctionSpec("GetEffect", "o"),
    0x2026: FunctionSpec("GetRace", "o"),
    0x2027: FunctionSpec("GetPCSleep"),
    0x2028: FunctionSpec("GetWeaponDrawn"),
    0x2029: FunctionSpec("GetSoundPlaying", "o"),
    0x202A: FunctionSpec("HasItemEquipped", "o"),
    0x202B: FunctionSpec("GetScale"),
    0x202C: FunctionSpec("SameFaction"),
    0x202D: FunctionSpec("GetFactionReaction", "oo"),
    0x202E: FunctionSpec("GetCommonDisease"),
    0x202F: FunctionSpec("GetBlightDisease"),
    0x2030: FunctionSpec("IsWerewolf"),
    0x2031: FunctionSpec("GetPCCrimeLevel"),
    0x2032: FunctionSpec("GetCurrentWeather"),
    0x2033: FunctionSpec("GetWaterLevel"),
}
