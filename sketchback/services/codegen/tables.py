"""
Mapping tables for code generation.

Every view attribute, block tag, expression tag and component declaration the
generators understand is listed here. Lookups that miss are errors, never
silently skipped.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from ...models.view import AttributeKind


class ValueFormat(str, Enum):
    """How an attribute value is rendered into markup."""

    SIZE = "size"
    DP = "dp"
    SP = "sp"
    TEXT = "text"
    COLOR = "color"
    VERBATIM = "verbatim"
    BOOLEAN = "boolean"
    DRAWABLE = "drawable"
    FONT = "font"
    LAYOUT = "layout"


class AttributeSpec(BaseModel):
    """Mapping entry for one view attribute."""

    model_config = ConfigDict(frozen=True)

    xml_name: str
    kind: AttributeKind
    format: ValueFormat
    namespace: str = "android"


def _attr(xml_name: str, kind: AttributeKind, fmt: ValueFormat, namespace: str = "android") -> AttributeSpec:
    return AttributeSpec(xml_name=xml_name, kind=kind, format=fmt, namespace=namespace)


_D, _S, _C, _R = AttributeKind.DIMENSION, AttributeKind.TEXT, AttributeKind.COLOR, AttributeKind.RESOURCE
_N, _B, _E = AttributeKind.NUMBER, AttributeKind.BOOLEAN, AttributeKind.ENUM

ATTRIBUTES: dict[str, AttributeSpec] = {
    "layout_width": _attr("layout_width", _D, ValueFormat.SIZE),
    "layout_height": _attr("layout_height", _D, ValueFormat.SIZE),
    "padding": _attr("padding", _D, ValueFormat.DP),
    "padding_left": _attr("paddingLeft", _D, ValueFormat.DP),
    "padding_top": _attr("paddingTop", _D, ValueFormat.DP),
    "padding_right": _attr("paddingRight", _D, ValueFormat.DP),
    "padding_bottom": _attr("paddingBottom", _D, ValueFormat.DP),
    "layout_margin": _attr("layout_margin", _D, ValueFormat.DP),
    "layout_margin_left": _attr("layout_marginLeft", _D, ValueFormat.DP),
    "layout_margin_top": _attr("layout_marginTop", _D, ValueFormat.DP),
    "layout_margin_right": _attr("layout_marginRight", _D, ValueFormat.DP),
    "layout_margin_bottom": _attr("layout_marginBottom", _D, ValueFormat.DP),
    "text": _attr("text", _S, ValueFormat.TEXT),
    "hint": _attr("hint", _S, ValueFormat.TEXT),
    "textSize": _attr("textSize", _N, ValueFormat.SP),
    "textStyle": _attr("textStyle", _E, ValueFormat.VERBATIM),
    "textColor": _attr("textColor", _C, ValueFormat.COLOR),
    "hintTextColor": _attr("textColorHint", _C, ValueFormat.COLOR),
    "background": _attr("background", _C, ValueFormat.COLOR),
    "backgroundResource": _attr("background", _R, ValueFormat.DRAWABLE),
    "src": _attr("src", _R, ValueFormat.DRAWABLE),
    "font": _attr("fontFamily", _R, ValueFormat.FONT),
    "gravity": _attr("gravity", _E, ValueFormat.VERBATIM),
    "layout_gravity": _attr("layout_gravity", _E, ValueFormat.VERBATIM),
    "orientation": _attr("orientation", _E, ValueFormat.VERBATIM),
    "visibility": _attr("visibility", _E, ValueFormat.VERBATIM),
    "inputType": _attr("inputType", _E, ValueFormat.VERBATIM),
    "scaleType": _attr("scaleType", _E, ValueFormat.VERBATIM),
    "layout_weight": _attr("layout_weight", _N, ValueFormat.VERBATIM),
    "max": _attr("max", _N, ValueFormat.VERBATIM),
    "progress": _attr("progress", _N, ValueFormat.VERBATIM),
    "alpha": _attr("alpha", _N, ValueFormat.VERBATIM),
    "lines": _attr("lines", _N, ValueFormat.VERBATIM),
    "enabled": _attr("enabled", _B, ValueFormat.BOOLEAN),
    "clickable": _attr("clickable", _B, ValueFormat.BOOLEAN),
    "checked": _attr("checked", _B, ValueFormat.BOOLEAN),
    "singleLine": _attr("singleLine", _B, ValueFormat.BOOLEAN),
    "listitem": _attr("listitem", _R, ValueFormat.LAYOUT, namespace="tools"),
}


class Template(BaseModel):
    """A statement or expression template with positional ``{0}``.. slots."""

    model_config = ConfigDict(frozen=True)

    template: str
    arity: int
    imports: tuple[str, ...] = ()


def _t(template: str, arity: int, *imports: str) -> Template:
    return Template(template=template, arity=arity, imports=imports)


TOAST = "android.widget.Toast"
VIEW = "android.view.View"

STATEMENTS: dict[str, Template] = {
    "showMessage": _t("Toast.makeText(getApplicationContext(), {0}, Toast.LENGTH_SHORT).show();", 1, TOAST),
    "setText": _t("{0}.setText({1});", 2),
    "setHint": _t("{0}.setHint({1});", 2),
    "setEnable": _t("{0}.setEnabled({1});", 2),
    "setClickable": _t("{0}.setClickable({1});", 2),
    "setVisible": _t("{0}.setVisibility(View.{1});", 2, VIEW),
    "setChecked": _t("{0}.setChecked({1});", 2),
    "setTextColor": _t("{0}.setTextColor({1});", 2),
    "setBgColor": _t("{0}.setBackgroundColor({1});", 2),
    "setImage": _t("{0}.setImageResource({1});", 2),
    "setProgress": _t("{0}.setProgress((int) ({1}));", 2),
    "requestFocus": _t("{0}.requestFocus();", 1),
    "webViewLoadUrl": _t("{0}.loadUrl({1});", 2),
    "addList": _t("{0}.add({1});", 2),
    "insertList": _t("{0}.add((int) ({2}), {1});", 3),
    "deleteList": _t("{0}.remove((int) ({1}));", 2),
    "clearList": _t("{0}.clear();", 1),
    "mapPut": _t("{0}.put({1}, {2});", 3),
    "mapRemove": _t("{0}.remove({1});", 2),
    "mapClear": _t("{0}.clear();", 1),
    "intentSetScreen": _t("{0}.setClass(getApplicationContext(), {1}.class);", 2),
    "intentPutExtra": _t("{0}.putExtra({1}, {2});", 3),
    "startActivity": _t("startActivity({0});", 1),
    "finishActivity": _t("finish();", 0),
    "prefSave": _t("{0}.edit().putString({1}, {2}).commit();", 3),
    "prefRemove": _t("{0}.edit().remove({1}).commit();", 2),
    "vibratorAction": _t("{0}.vibrate((long) ({1}));", 2),
    "calendarGetNow": _t("{0} = Calendar.getInstance();", 1),
    "timerCancel": _t("{0}.cancel();", 1),
    "break": _t("break;", 0),
    "setVar": _t("{0} = {1};", 2),
    "increaseInt": _t("{0}++;", 1),
    "decreaseInt": _t("{0}--;", 1),
}

# Control-flow openers; branches after the first render as "} <opener>".
CONTROL_OPENERS: dict[str, Template] = {
    "if": _t("if ({0}) {{", 1),
    "elseIf": _t("}} else if ({0}) {{", 1),
    "else": _t("}} else {{", 0),
    "repeat": _t("for (int {counter} = 0; {counter} < (int) ({0}); {counter}++) {{", 1),
    "forever": _t("while (true) {{", 0),
    "while": _t("while ({0}) {{", 1),
}

EXPRESSIONS: dict[str, Template] = {
    "true": _t("true", 0),
    "false": _t("false", 0),
    "not": _t("!{0}", 1),
    "&&": _t("({0} && {1})", 2),
    "||": _t("({0} || {1})", 2),
    "==": _t("({0} == {1})", 2),
    "!=": _t("({0} != {1})", 2),
    "<": _t("({0} < {1})", 2),
    ">": _t("({0} > {1})", 2),
    "<=": _t("({0} <= {1})", 2),
    ">=": _t("({0} >= {1})", 2),
    "+": _t("({0} + {1})", 2),
    "-": _t("({0} - {1})", 2),
    "*": _t("({0} * {1})", 2),
    "/": _t("({0} / {1})", 2),
    "%": _t("({0} % {1})", 2),
    "random": _t("({0} + (int) (Math.random() * ({1} - {0} + 1)))", 2),
    "mathAbs": _t("Math.abs({0})", 1),
    "mathRound": _t("Math.round({0})", 1),
    "mathSqrt": _t("Math.sqrt({0})", 1),
    "mathPow": _t("Math.pow({0}, {1})", 2),
    "mathMin": _t("Math.min({0}, {1})", 2),
    "mathMax": _t("Math.max({0}, {1})", 2),
    "stringLength": _t("{0}.length()", 1),
    "stringJoin": _t("{0}.concat({1})", 2),
    "stringEquals": _t("{0}.equals({1})", 2),
    "stringContains": _t("{0}.contains({1})", 2),
    "stringIndex": _t("{1}.indexOf({0})", 2),
    "stringSub": _t("{0}.substring((int) ({1}), (int) ({2}))", 3),
    "toUpperCase": _t("{0}.toUpperCase()", 1),
    "toLowerCase": _t("{0}.toLowerCase()", 1),
    "trim": _t("{0}.trim()", 1),
    "toNumber": _t("Double.parseDouble({0})", 1),
    "toString": _t("String.valueOf((long) ({0}))", 1),
    "toStringWithDecimal": _t("String.valueOf({0})", 1),
    "getText": _t("{0}.getText().toString()", 1),
    "isChecked": _t("{0}.isChecked()", 1),
    "getProgress": _t("{0}.getProgress()", 1),
    "lengthList": _t("{0}.size()", 1),
    "getAtList": _t("{1}.get((int) ({0}))", 2),
    "containsList": _t("{1}.contains({0})", 2),
    "mapGet": _t("{0}.get({1}).toString()", 2),
    "mapContainKey": _t("{0}.containsKey({1})", 2),
    "mapSize": _t("{0}.size()", 1),
    "prefGet": _t('{0}.getString({1}, "")', 2),
    "intentGetString": _t("getIntent().getStringExtra({0})", 1),
    "calendarGetTime": _t("{0}.getTimeInMillis()", 1),
}


class Declaration(BaseModel):
    """How a screen-level variable, list or component becomes a field."""

    model_config = ConfigDict(frozen=True)

    java_type: str
    initializer: str | None = None
    setup: str | None = None
    imports: tuple[str, ...] = ()


HASH_MAP = "java.util.HashMap"
ARRAY_LIST = "java.util.ArrayList"
CONTEXT = "android.content.Context"

VARIABLES: dict[str, Declaration] = {
    "boolean": Declaration(java_type="boolean", initializer="false"),
    "number": Declaration(java_type="double", initializer="0"),
    "string": Declaration(java_type="String", initializer='""'),
    "map": Declaration(
        java_type="HashMap<String, Object>", initializer="new HashMap<>()", imports=(HASH_MAP,)
    ),
}

LISTS: dict[str, Declaration] = {
    "number": Declaration(java_type="ArrayList<Double>", initializer="new ArrayList<>()", imports=(ARRAY_LIST,)),
    "string": Declaration(java_type="ArrayList<String>", initializer="new ArrayList<>()", imports=(ARRAY_LIST,)),
    "map": Declaration(
        java_type="ArrayList<HashMap<String, Object>>",
        initializer="new ArrayList<>()",
        imports=(ARRAY_LIST, HASH_MAP),
    ),
}

COMPONENT_DECLARATIONS: dict[str, Declaration] = {
    "Intent": Declaration(
        java_type="Intent", initializer="new Intent()", imports=("android.content.Intent",)
    ),
    "SharedPreferences": Declaration(
        java_type="SharedPreferences",
        setup='{name} = getSharedPreferences({extra}, Context.MODE_PRIVATE);',
        imports=("android.content.SharedPreferences", CONTEXT),
    ),
    "Calendar": Declaration(
        java_type="Calendar", initializer="Calendar.getInstance()", imports=("java.util.Calendar",)
    ),
    "Vibrator": Declaration(
        java_type="Vibrator",
        setup="{name} = (Vibrator) getSystemService(Context.VIBRATOR_SERVICE);",
        imports=("android.os.Vibrator", CONTEXT),
    ),
    "Timer": Declaration(java_type="Timer", initializer="new Timer()", imports=("java.util.Timer",)),
}

ORIENTATIONS: dict[str, str | None] = {
    "portrait": "setRequestedOrientation(ActivityInfo.SCREEN_ORIENTATION_PORTRAIT);",
    "landscape": "setRequestedOrientation(ActivityInfo.SCREEN_ORIENTATION_LANDSCAPE);",
    "both": None,
}

KEYBOARD_MODES: dict[str, str | None] = {
    "unspecified": None,
    "visible": "getWindow().setSoftInputMode(WindowManager.LayoutParams.SOFT_INPUT_STATE_ALWAYS_VISIBLE);",
    "hidden": "getWindow().setSoftInputMode(WindowManager.LayoutParams.SOFT_INPUT_STATE_ALWAYS_HIDDEN);",
}
