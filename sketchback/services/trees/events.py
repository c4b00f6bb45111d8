"""
Event table.

Handler keys follow a fixed naming convention (``<viewId>_<event>``,
``<name>_moreBlock``, ``onCreate_initializeLogic`` or a bare activity event).
Each event knows the arguments its blocks may reference and how the listener
delegating to the handler method is registered.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ...models.logic import HandlerArgument, HandlerKind, MoreBlockDeclaration

INITIALIZE_KEY = "onCreate_initializeLogic"
MORE_BLOCK_SUFFIX = "_moreBlock"

MORE_BLOCK_TYPES: dict[str, str] = {
    "s": "String",
    "d": "double",
    "b": "boolean",
    "m": "HashMap<String, Object>",
}


class EventSpec(BaseModel):
    """Binding information for one event name.

    ``listener`` lines use ``{view}`` and ``{method}`` placeholders; each
    leading TAB is one indentation level.
    """

    model_config = ConfigDict(frozen=True)

    arguments: tuple[HandlerArgument, ...] = ()
    listener: tuple[str, ...] = ()
    imports: tuple[str, ...] = ()
    components: tuple[str, ...] | None = Field(
        default=None, description="Component tags the event applies to; None for any view"
    )
    calls_super: bool = False


def _args(*pairs: tuple[str, str]) -> tuple[HandlerArgument, ...]:
    return tuple(HandlerArgument(java_type=t, name=n) for t, n in pairs)


ACTIVITY_EVENTS: dict[str, EventSpec] = {
    "onBackPressed": EventSpec(),
    "onStart": EventSpec(calls_super=True),
    "onResume": EventSpec(calls_super=True),
    "onPause": EventSpec(calls_super=True),
    "onStop": EventSpec(calls_super=True),
    "onDestroy": EventSpec(calls_super=True),
}

VIEW_EVENTS: dict[str, EventSpec] = {
    "onClick": EventSpec(
        arguments=_args(("View", "view")),
        imports=("android.view.View",),
        listener=(
            "{view}.setOnClickListener(new View.OnClickListener() {{",
            "\t@Override",
            "\tpublic void onClick(View _view) {{",
            "\t\t{method}(_view);",
            "\t}}",
            "}});",
        ),
    ),
    "onLongClick": EventSpec(
        arguments=_args(("View", "view")),
        imports=("android.view.View",),
        listener=(
            "{view}.setOnLongClickListener(new View.OnLongClickListener() {{",
            "\t@Override",
            "\tpublic boolean onLongClick(View _view) {{",
            "\t\t{method}(_view);",
            "\t\treturn true;",
            "\t}}",
            "}});",
        ),
    ),
    "onCheckedChanged": EventSpec(
        arguments=_args(("CompoundButton", "buttonView"), ("boolean", "isChecked")),
        imports=("android.widget.CompoundButton",),
        components=("CheckBox", "Switch"),
        listener=(
            "{view}.setOnCheckedChangeListener(new CompoundButton.OnCheckedChangeListener() {{",
            "\t@Override",
            "\tpublic void onCheckedChanged(CompoundButton _buttonView, boolean _isChecked) {{",
            "\t\t{method}(_buttonView, _isChecked);",
            "\t}}",
            "}});",
        ),
    ),
    "onTextChanged": EventSpec(
        arguments=_args(("String", "charSeq")),
        imports=("android.text.Editable", "android.text.TextWatcher"),
        components=("EditText",),
        listener=(
            "{view}.addTextChangedListener(new TextWatcher() {{",
            "\t@Override",
            "\tpublic void onTextChanged(CharSequence _param1, int _param2, int _param3, int _param4) {{",
            "\t\t{method}(_param1.toString());",
            "\t}}",
            "",
            "\t@Override",
            "\tpublic void beforeTextChanged(CharSequence _param1, int _param2, int _param3, int _param4) {{",
            "\t}}",
            "",
            "\t@Override",
            "\tpublic void afterTextChanged(Editable _param1) {{",
            "\t}}",
            "}});",
        ),
    ),
    "onProgressChanged": EventSpec(
        arguments=_args(("SeekBar", "seekBar"), ("int", "progressValue"), ("boolean", "fromUser")),
        components=("SeekBar",),
        listener=(
            "{view}.setOnSeekBarChangeListener(new SeekBar.OnSeekBarChangeListener() {{",
            "\t@Override",
            "\tpublic void onProgressChanged(SeekBar _seekBar, int _progressValue, boolean _fromUser) {{",
            "\t\t{method}(_seekBar, _progressValue, _fromUser);",
            "\t}}",
            "",
            "\t@Override",
            "\tpublic void onStartTrackingTouch(SeekBar _seekBar) {{",
            "\t}}",
            "",
            "\t@Override",
            "\tpublic void onStopTrackingTouch(SeekBar _seekBar) {{",
            "\t}}",
            "}});",
        ),
    ),
    "onItemSelected": EventSpec(
        arguments=_args(("int", "position")),
        imports=("android.view.View", "android.widget.AdapterView"),
        components=("Spinner",),
        listener=(
            "{view}.setOnItemSelectedListener(new AdapterView.OnItemSelectedListener() {{",
            "\t@Override",
            "\tpublic void onItemSelected(AdapterView<?> _param1, View _param2, int _position, long _param4) {{",
            "\t\t{method}(_position);",
            "\t}}",
            "",
            "\t@Override",
            "\tpublic void onNothingSelected(AdapterView<?> _param1) {{",
            "\t}}",
            "}});",
        ),
    ),
    "onItemClicked": EventSpec(
        arguments=_args(("int", "position")),
        imports=("android.view.View", "android.widget.AdapterView"),
        components=("ListView",),
        listener=(
            "{view}.setOnItemClickListener(new AdapterView.OnItemClickListener() {{",
            "\t@Override",
            "\tpublic void onItemClick(AdapterView<?> _param1, View _param2, int _position, long _param4) {{",
            "\t\t{method}(_position);",
            "\t}}",
            "}});",
        ),
    ),
}


class HandlerBinding(BaseModel):
    """What a handler key resolves to."""

    kind: HandlerKind
    target: str = ""
    event: str = ""


def classify_handler(key: str) -> HandlerBinding | None:
    """Resolve a handler key by naming convention.

    Returns:
        The binding, or None when the key names no known event.
    """
    if key == INITIALIZE_KEY:
        return HandlerBinding(kind=HandlerKind.INITIALIZE, event="initializeLogic")
    if key.endswith(MORE_BLOCK_SUFFIX) and len(key) > len(MORE_BLOCK_SUFFIX):
        return HandlerBinding(kind=HandlerKind.MORE_BLOCK, target=key[: -len(MORE_BLOCK_SUFFIX)])
    if key in ACTIVITY_EVENTS:
        return HandlerBinding(kind=HandlerKind.ACTIVITY_EVENT, event=key)

    target, _, event = key.rpartition("_")
    if target and event in VIEW_EVENTS:
        return HandlerBinding(kind=HandlerKind.VIEW_EVENT, target=target, event=event)
    return None


def handler_arguments(binding: HandlerBinding, more_block: MoreBlockDeclaration | None = None) -> list[HandlerArgument]:
    """Arguments visible to blocks of a handler."""
    if binding.kind == HandlerKind.VIEW_EVENT:
        return list(VIEW_EVENTS[binding.event].arguments)
    if binding.kind == HandlerKind.MORE_BLOCK and more_block is not None:
        return [
            HandlerArgument(java_type=MORE_BLOCK_TYPES[p.type_code], name=p.name)
            for p in more_block.parameters
        ]
    return []
