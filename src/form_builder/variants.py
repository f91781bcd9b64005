"""
Variant dispatch table.

Every field variant is described by one ``VariantHandler`` that knows
its default properties, its validation rule, its empty default value,
its preview widget and the JSX snippet emitted by the code generators.
Adding a variant means registering one handler.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from form_builder.constants import (
    CREDIT_CARD_PATTERN,
    DEFAULT_FIELD_CONFIG,
    OTP_LENGTH,
    PHONE_PATTERN,
)
from form_builder.jsx import (
    ControlBinding,
    element,
    js_literal,
    js_number,
    js_string,
    jsx_attr,
    jsx_expr_attr,
)
from form_builder.models.field_definitions import FieldDescriptor
from form_builder.models.schema_output import FieldRule, RuleKind
from form_builder import widgets
from form_builder.widgets import LiveBinding, RenderedControl, WidgetRenderer, field_options

Import = tuple[str, str]  # (module, exported name)


@dataclass
class Snippet:
    """Generated control source for one field."""

    jsx: list[str]
    imports: list[Import] = field(default_factory=list)
    react_imports: list[str] = field(default_factory=list)
    module_setup: list[str] = field(default_factory=list)
    component_setup: list[str] = field(default_factory=list)


class VariantHandler:
    """Base handler; subclasses set the value kind and fill in the snippet."""

    kind: RuleKind = "string"

    def __init__(
        self,
        variant: str,
        widget: WidgetRenderer,
        *,
        pattern: str | None = None,
        min_length: int | None = None,
        max_length: int | None = None,
    ):
        self.variant = variant
        self.widget = widget
        self.pattern = pattern
        self.min_length = min_length
        self.max_length = max_length

    def default_config(self) -> dict[str, str]:
        config = DEFAULT_FIELD_CONFIG.get(self.variant, {})
        return {
            "label": config.get("label", ""),
            "description": config.get("description", ""),
            "placeholder": config.get("placeholder", ""),
        }

    def validation_rule(self, f: FieldDescriptor) -> FieldRule:
        return FieldRule(
            name=f.name,
            variant=f.variant,
            label=f.label,
            kind=self.kind,
            required=f.is_required,
            pattern=self.pattern,
            min_length=self.min_length,
            max_length=self.max_length,
        )

    def default_value(self, f: FieldDescriptor) -> Any:
        return f.value if isinstance(f.value, str) else ""

    def render_control(self, f: FieldDescriptor, binding: LiveBinding) -> RenderedControl:
        return self.widget(f, binding)

    def generate_snippet(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        raise NotImplementedError


def _common_attrs(f: FieldDescriptor, binding: ControlBinding) -> list[str]:
    attrs = []
    if binding.element_id:
        attrs.append(jsx_expr_attr("id", binding.element_id))
    return attrs


def _trailing_attrs(f: FieldDescriptor) -> list[str]:
    attrs = []
    if f.disabled:
        attrs.append(jsx_attr("disabled", True))
    if f.class_name:
        attrs.append(jsx_attr("className", f.class_name))
    return attrs


def _options_const(f: FieldDescriptor) -> str:
    return f"{f.name}Options"


class TextHandler(VariantHandler):
    """Single-line text, password, phone and card number inputs."""

    def __init__(self, variant: str, input_type: str = "text", component: Import | None = None, **kwargs: Any):
        super().__init__(variant, widgets.input_widget(input_type), **kwargs)
        self.input_type = input_type
        self.component = component or ("@/components/ui/input", "Input")

    def generate_snippet(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        module, tag = self.component
        attrs = _common_attrs(f, binding)
        if f.placeholder:
            attrs.append(jsx_attr("placeholder", f.placeholder))
        if tag == "Input":
            attrs.append(jsx_attr("type", self.input_type))
            attrs.append(jsx_expr_attr("value", binding.value))
            attrs.append(jsx_expr_attr("onChange", f"(e) => {binding.call('e.target.value')}"))
        else:
            attrs.append(jsx_expr_attr("value", binding.value))
            attrs.append(jsx_expr_attr("onChange", binding.callback))
        if binding.blur:
            attrs.append(jsx_expr_attr("onBlur", binding.blur))
        attrs += _trailing_attrs(f)
        return Snippet(jsx=element(tag, attrs), imports=[(module, tag)])


class TextareaHandler(VariantHandler):
    def __init__(self, variant: str):
        super().__init__(variant, widgets.textarea_widget)

    def generate_snippet(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        attrs = _common_attrs(f, binding)
        if f.placeholder:
            attrs.append(jsx_attr("placeholder", f.placeholder))
        attrs.append(jsx_attr("className", f.class_name or "resize-none"))
        attrs.append(jsx_expr_attr("value", binding.value))
        attrs.append(jsx_expr_attr("onChange", f"(e) => {binding.call('e.target.value')}"))
        if binding.blur:
            attrs.append(jsx_expr_attr("onBlur", binding.blur))
        if f.disabled:
            attrs.append(jsx_attr("disabled", True))
        return Snippet(
            jsx=element("Textarea", attrs),
            imports=[("@/components/ui/textarea", "Textarea")],
        )


class OtpHandler(VariantHandler):
    """Fixed-length one-time code."""

    def __init__(self, variant: str, length: int = OTP_LENGTH):
        super().__init__(
            variant,
            widgets.otp_widget,
            pattern=rf"^\d{{{length}}}$",
            min_length=length,
            max_length=length,
        )
        self.length = length

    def generate_snippet(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        attrs = [
            jsx_expr_attr("maxLength", str(self.length)),
            jsx_expr_attr("value", binding.value),
            jsx_expr_attr("onChange", binding.callback),
        ] + _trailing_attrs(f)
        slots = [f"<InputOTPSlot index={{{i}}} />" for i in range(self.length)]
        group = element("InputOTPGroup", [], slots)
        return Snippet(
            jsx=element("InputOTP", attrs, group),
            imports=[
                ("@/components/ui/input-otp", "InputOTP"),
                ("@/components/ui/input-otp", "InputOTPGroup"),
                ("@/components/ui/input-otp", "InputOTPSlot"),
            ],
        )


class SignatureHandler(VariantHandler):
    def __init__(self, variant: str, component: Import, uses_canvas_ref: bool = False):
        super().__init__(variant, widgets.signature_widget)
        self.component = component
        self.uses_canvas_ref = uses_canvas_ref

    def generate_snippet(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        module, tag = self.component
        if self.uses_canvas_ref:
            ref = f"{f.name}CanvasRef"
            attrs = [
                jsx_expr_attr("canvasRef", ref),
                jsx_expr_attr("onSignatureChange", binding.callback),
            ]
            return Snippet(
                jsx=element(tag, attrs + _trailing_attrs(f)),
                imports=[(module, tag)],
                react_imports=["useRef"],
                component_setup=[f"const {ref} = useRef<HTMLCanvasElement>(null);"],
            )
        attrs = [
            jsx_expr_attr("value", binding.value),
            jsx_expr_attr("onChange", binding.callback),
        ]
        return Snippet(jsx=element(tag, attrs + _trailing_attrs(f)), imports=[(module, tag)])


class ChoiceHandler(VariantHandler):
    """Single choice from a list of options."""

    def __init__(self, variant: str, style: str, fallback_options: list[str]):
        widget = widgets.radio_widget(fallback_options) if style == "radio" else widgets.select_widget(fallback_options)
        super().__init__(variant, widget)
        self.style = style
        self.fallback_options = fallback_options

    def generate_snippet(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        options = field_options(f, self.fallback_options)
        const = _options_const(f)
        module_setup = [f"const {const} = {js_literal(options)};"]
        if self.style == "radio":
            return self._radio(f, binding, const, module_setup)
        if self.style == "combobox":
            return self._combobox(f, binding, const, module_setup)
        return self._select(f, binding, const, module_setup)

    def _select(self, f, binding, const, module_setup) -> Snippet:
        trigger = element("SelectTrigger", [], [f"<SelectValue {jsx_attr('placeholder', f.placeholder or 'Select an option')} />"])
        item = element("SelectItem", ["key={option}", "value={option}"], ["{option}"])
        content = element("SelectContent", [], [
            f"{{{const}.map((option) => (",
            *[f"  {line}" for line in item],
            "))}",
        ])
        attrs = [
            jsx_expr_attr("onValueChange", binding.callback),
            jsx_expr_attr("value", binding.value),
        ] + _trailing_attrs(f)
        return Snippet(
            jsx=element("Select", attrs, trigger + content),
            imports=[("@/components/ui/select", n) for n in ("Select", "SelectContent", "SelectItem", "SelectTrigger", "SelectValue")],
            module_setup=module_setup,
        )

    def _radio(self, f, binding, const, module_setup) -> Snippet:
        item_id = f'"{f.name}-" + option'
        row = element(
            "div",
            ["key={option}", 'className="flex items-center space-x-3"'],
            [
                f"<RadioGroupItem value={{option}} id={{{item_id}}} />",
                f"<Label htmlFor={{{item_id}}}>{{option}}</Label>",
            ],
        )
        attrs = [
            jsx_expr_attr("onValueChange", binding.callback),
            jsx_expr_attr("value", binding.value),
            jsx_attr("className", f.class_name or "flex flex-col space-y-1"),
        ]
        if f.disabled:
            attrs.append(jsx_attr("disabled", True))
        return Snippet(
            jsx=element("RadioGroup", attrs, [
                f"{{{const}.map((option) => (",
                *[f"  {line}" for line in row],
                "))}",
            ]),
            imports=[
                ("@/components/ui/radio-group", "RadioGroup"),
                ("@/components/ui/radio-group", "RadioGroupItem"),
                ("@/components/ui/label", "Label"),
            ],
            module_setup=module_setup,
        )

    def _combobox(self, f, binding, const, module_setup) -> Snippet:
        placeholder = js_string(f.placeholder or "Select an option")
        button = element(
            "Button",
            [
                'variant="outline"',
                'role="combobox"',
                jsx_expr_attr("className", f'cn("w-[200px] justify-between", !{binding.value} && "text-muted-foreground")'),
            ],
            [
                f"{{{binding.value} || {placeholder}}}",
                '<ChevronsUpDown className="ml-2 h-4 w-4 shrink-0 opacity-50" />',
            ],
        )
        check = element(
            "Check",
            [jsx_expr_attr("className", f'cn("mr-2 h-4 w-4", option === {binding.value} ? "opacity-100" : "opacity-0")')],
        )
        item = element(
            "CommandItem",
            ["value={option}", "key={option}", jsx_expr_attr("onSelect", f"() => {binding.call('option')}")],
            [*check, "{option}"],
        )
        command = element("Command", [], [
            '<CommandInput placeholder="Search..." />',
            *element("CommandList", [], [
                "<CommandEmpty>No option found.</CommandEmpty>",
                *element("CommandGroup", [], [
                    f"{{{const}.map((option) => (",
                    *[f"  {line}" for line in item],
                    "))}",
                ]),
            ]),
        ])
        jsx = element("Popover", [], [
            *element("PopoverTrigger", ["asChild"], button),
            *element("PopoverContent", ['className="w-[200px] p-0"'], command),
        ])
        return Snippet(
            jsx=jsx,
            imports=[
                ("@/components/ui/button", "Button"),
                ("@/components/ui/popover", "Popover"),
                ("@/components/ui/popover", "PopoverContent"),
                ("@/components/ui/popover", "PopoverTrigger"),
                ("@/components/ui/command", "Command"),
                ("@/components/ui/command", "CommandEmpty"),
                ("@/components/ui/command", "CommandGroup"),
                ("@/components/ui/command", "CommandInput"),
                ("@/components/ui/command", "CommandItem"),
                ("@/components/ui/command", "CommandList"),
                ("@/lib/utils", "cn"),
                ("lucide-react", "Check"),
                ("lucide-react", "ChevronsUpDown"),
            ],
            module_setup=module_setup,
        )


class BooleanHandler(VariantHandler):
    """Checkbox and switch; an agreement checkbox must be ticked when required."""

    kind = "boolean"

    def __init__(self, variant: str, component: Import, agreement: bool = False):
        super().__init__(variant, widgets.toggle_widget("checkbox" if agreement else "switch"))
        self.component = component
        self.agreement = agreement

    def validation_rule(self, f: FieldDescriptor) -> FieldRule:
        rule = super().validation_rule(f)
        rule.must_be_true = self.agreement and f.is_required
        return rule

    def default_value(self, f: FieldDescriptor) -> Any:
        return f.value if isinstance(f.value, bool) else False

    def generate_snippet(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        module, tag = self.component
        attrs = _common_attrs(f, binding) + [
            jsx_expr_attr("checked", binding.value),
            jsx_expr_attr("onCheckedChange", binding.callback),
        ] + _trailing_attrs(f)
        return Snippet(jsx=element(tag, attrs), imports=[(module, tag)])


class NumberHandler(VariantHandler):
    """Numeric value bounded by the field's min/max/step."""

    kind = "number"

    def __init__(self, variant: str, widget: WidgetRenderer, style: str):
        super().__init__(variant, widget)
        self.style = style

    def validation_rule(self, f: FieldDescriptor) -> FieldRule:
        rule = super().validation_rule(f)
        rule.minimum = f.min
        rule.maximum = f.max
        rule.step = f.step
        return rule

    def default_value(self, f: FieldDescriptor) -> Any:
        if isinstance(f.value, (int, float)) and not isinstance(f.value, bool):
            return f.value
        return f.min if f.min is not None else 0

    def generate_snippet(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        if self.style == "rating":
            attrs = [
                jsx_expr_attr("value", binding.value),
                jsx_expr_attr("onChange", binding.callback),
            ]
            if f.max is not None:
                attrs.append(jsx_expr_attr("max", js_number(f.max)))
            return Snippet(
                jsx=element("Rating", attrs + _trailing_attrs(f)),
                imports=[("@/components/ui/rating", "Rating")],
            )
        attrs = [
            jsx_expr_attr("min", js_number(f.min if f.min is not None else 0)),
            jsx_expr_attr("max", js_number(f.max if f.max is not None else 100)),
            jsx_expr_attr("step", js_number(f.step if f.step is not None else 1)),
            jsx_expr_attr("value", f"[{binding.value}]"),
            jsx_expr_attr("onValueChange", f"(values) => {binding.call('values[0]')}"),
        ] + _trailing_attrs(f)
        return Snippet(jsx=element("Slider", attrs), imports=[("@/components/ui/slider", "Slider")])


class ArrayHandler(VariantHandler):
    """List of strings: multi select, tags, files, country/state pair."""

    kind = "array"

    def __init__(self, variant: str, widget: WidgetRenderer, style: str, max_items: int | None = None, fallback_options: list[str] | None = None):
        super().__init__(variant, widget)
        self.style = style
        self.max_items = max_items
        self.fallback_options = fallback_options or []

    def validation_rule(self, f: FieldDescriptor) -> FieldRule:
        rule = super().validation_rule(f)
        rule.max_items = self.max_items
        return rule

    def default_value(self, f: FieldDescriptor) -> Any:
        if isinstance(f.value, list):
            return list(f.value)
        return []

    def generate_snippet(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        return getattr(self, f"_{self.style}")(f, binding)

    def _multi_select(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        const = _options_const(f)
        item = element("MultiSelectorItem", ["key={option}", "value={option}"], ["{option}"])
        content = element("MultiSelectorContent", [], element("MultiSelectorList", [], [
            f"{{{const}.map((option) => (",
            *[f"  {line}" for line in item],
            "))}",
        ]))
        trigger = element("MultiSelectorTrigger", [], [
            f"<MultiSelectorInput {jsx_attr('placeholder', f.placeholder or 'Select options')} />",
        ])
        attrs = [
            jsx_expr_attr("values", binding.value),
            jsx_expr_attr("onValuesChange", binding.callback),
            "loop",
            jsx_attr("className", f.class_name or "max-w-xs"),
        ]
        return Snippet(
            jsx=element("MultiSelector", attrs, trigger + content),
            imports=[
                ("@/components/ui/multi-select", n)
                for n in (
                    "MultiSelector",
                    "MultiSelectorContent",
                    "MultiSelectorInput",
                    "MultiSelectorItem",
                    "MultiSelectorList",
                    "MultiSelectorTrigger",
                )
            ],
            module_setup=[f"const {const} = {js_literal(field_options(f, self.fallback_options))};"],
        )

    def _tags(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        attrs = [
            jsx_expr_attr("value", binding.value),
            jsx_expr_attr("onValueChange", binding.callback),
            jsx_attr("placeholder", f.placeholder or "Enter your tags"),
        ] + _trailing_attrs(f)
        return Snippet(jsx=element("TagsInput", attrs), imports=[("@/components/ui/tags-input", "TagsInput")])

    def _file(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        attrs = [
            jsx_expr_attr("value", binding.value),
            jsx_expr_attr("onValueChange", binding.callback),
            jsx_expr_attr("dropzoneOptions", "{ maxFiles: 5, maxSize: 1024 * 1024 * 4, multiple: true }"),
        ] + _trailing_attrs(f)
        return Snippet(jsx=element("FileUploader", attrs), imports=[("@/components/ui/file-upload", "FileUploader")])

    def _location(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        country = '[country?.name || "", ""]'
        state = f'[{binding.value}?.[0] || "", state?.name || ""]'
        attrs = [
            jsx_expr_attr("onCountryChange", f"(country) => {binding.call(country)}"),
            jsx_expr_attr("onStateChange", f"(state) => {binding.call(state)}"),
        ]
        return Snippet(
            jsx=element("LocationSelector", attrs),
            imports=[("@/components/ui/location-input", "LocationSelector")],
        )


class DateHandler(VariantHandler):
    """ISO 8601 date or date-time stored as text."""

    kind = "date"

    def __init__(self, variant: str, style: str):
        super().__init__(variant, widgets.date_widget(with_time=style != "date"))
        self.style = style

    def generate_snippet(self, f: FieldDescriptor, binding: ControlBinding) -> Snippet:
        value = binding.value
        as_date = f"{value} ? new Date({value}) : undefined"
        to_text = 'date ? date.toISOString() : ""'
        if self.style == "datetime":
            units = '["hours", "minutes", "am/pm"]' if f.hour12 is not False else '["hours", "minutes", "seconds"]'
            attrs = [
                jsx_expr_attr("value", as_date),
                jsx_expr_attr("onChange", f"(date) => {binding.call(to_text)}"),
                jsx_expr_attr("format", f'[["months", "days", "years"], {units}]'),
            ] + _trailing_attrs(f)
            return Snippet(
                jsx=element("DatetimePicker", attrs),
                imports=[("@/components/ui/datetime-picker", "DatetimePicker")],
            )
        if self.style == "smart":
            attrs = [
                jsx_expr_attr("value", as_date),
                jsx_expr_attr("onValueChange", f"(date) => {binding.call(to_text)}"),
                jsx_attr("placeholder", f.placeholder or "e.g. Tomorrow morning 9am"),
            ]
            if f.locale:
                attrs.append(jsx_attr("locale", f.locale))
            if f.hour12 is not None:
                attrs.append(jsx_expr_attr("hour12", "true" if f.hour12 else "false"))
            return Snippet(
                jsx=element("SmartDatetimeInput", attrs + _trailing_attrs(f)),
                imports=[("@/components/ui/smart-datetime-input", "SmartDatetimeInput")],
            )

        button = element(
            "Button",
            [
                'variant="outline"',
                jsx_expr_attr("className", f'cn("w-[240px] pl-3 text-left font-normal", !{value} && "text-muted-foreground")'),
            ],
            [
                f'{{{value} ? format(new Date({value}), "PPP") : <span>Pick a date</span>}}',
                '<CalendarIcon className="ml-auto h-4 w-4 opacity-50" />',
            ],
        )
        calendar = element(
            "Calendar",
            [
                'mode="single"',
                jsx_expr_attr("selected", as_date),
                jsx_expr_attr("onSelect", f"(date) => {binding.call(to_text)}"),
                "initialFocus",
            ],
        )
        jsx = element("Popover", [], [
            *element("PopoverTrigger", ["asChild"], button),
            *element("PopoverContent", ['className="w-auto p-0"', 'align="start"'], calendar),
        ])
        return Snippet(
            jsx=jsx,
            imports=[
                ("@/components/ui/button", "Button"),
                ("@/components/ui/calendar", "Calendar"),
                ("@/components/ui/popover", "Popover"),
                ("@/components/ui/popover", "PopoverContent"),
                ("@/components/ui/popover", "PopoverTrigger"),
                ("@/lib/utils", "cn"),
                ("date-fns", "format"),
                ("lucide-react", "CalendarIcon"),
            ],
        )


VARIANTS: dict[str, VariantHandler] = {}


def register_variant(handler: VariantHandler) -> VariantHandler:
    """Add (or replace) the handler for ``handler.variant``."""
    VARIANTS[handler.variant] = handler
    return handler


def get_handler(variant: str) -> VariantHandler | None:
    return VARIANTS.get(variant)


def default_config(variant: str) -> dict[str, str]:
    """Label/description/placeholder for a new field; empty strings for unknown variants."""
    handler = get_handler(variant)
    if handler is None:
        return {"label": "", "description": "", "placeholder": ""}
    return handler.default_config()


_LANGUAGES = ["English", "French", "German", "Spanish", "Portuguese", "Russian", "Japanese", "Korean", "Chinese"]
_EMAILS = ["m@example.com", "m@google.com", "m@support.com"]
_GENDERS = ["Male", "Female", "Other"]
_FRAMEWORKS = ["React", "Vue", "Svelte", "Angular"]

_BUILTIN: list[Callable[[], VariantHandler]] = [
    lambda: BooleanHandler("Checkbox", ("@/components/ui/checkbox", "Checkbox"), agreement=True),
    lambda: ChoiceHandler("Combobox", "combobox", _LANGUAGES),
    lambda: DateHandler("Date Picker", "date"),
    lambda: DateHandler("Datetime Picker", "datetime"),
    lambda: ArrayHandler("File Input", widgets.file_widget, "file"),
    lambda: TextHandler("Input"),
    lambda: OtpHandler("Input OTP"),
    lambda: ArrayHandler("Location Input", widgets.location_widget, "location", max_items=2),
    lambda: ArrayHandler("Multi Select", widgets.select_widget(_FRAMEWORKS, multiple=True), "multi_select", fallback_options=_FRAMEWORKS),
    lambda: TextHandler("Password", input_type="password"),
    lambda: TextHandler("Phone", input_type="tel", component=("@/components/ui/phone-input", "PhoneInput"), pattern=PHONE_PATTERN),
    lambda: ChoiceHandler("Select", "select", _EMAILS),
    lambda: SignatureHandler("Signature Input", ("@/components/ui/signature-input", "SignatureInput"), uses_canvas_ref=True),
    lambda: SignatureHandler("Signature Pad", ("@/components/ui/signature-pad", "SignaturePad")),
    lambda: NumberHandler("Slider", widgets.slider_widget, "slider"),
    lambda: DateHandler("Smart Datetime Input", "smart"),
    lambda: BooleanHandler("Switch", ("@/components/ui/switch", "Switch")),
    lambda: ArrayHandler("Tags Input", widgets.tags_widget, "tags"),
    lambda: TextareaHandler("Textarea"),
    lambda: NumberHandler("Rating", widgets.rating_widget, "rating"),
    lambda: ChoiceHandler("RadioGroup", "radio", _GENDERS),
    lambda: TextHandler(
        "Credit Card",
        input_type="text",
        component=("@/components/ui/credit-card-input", "CreditCardInput"),
        pattern=CREDIT_CARD_PATTERN,
    ),
]

for _factory in _BUILTIN:
    register_variant(_factory())
