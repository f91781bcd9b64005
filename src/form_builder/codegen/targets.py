"""
Source generators for the supported form libraries.

All targets share the same document outline ("use client", imports,
the zod schema, one block per field or row group in list order and a
submit handler). A target only decides how a control is bound to form
state and how the surrounding form is wired.
"""

import logging
from typing import Any

from form_builder.codegen.formatter import format_source
from form_builder.codegen.writer import CodeWriter
from form_builder.codegen.zod import schema_declaration
from form_builder.constants import (
    BRING_YOUR_OWN,
    FORM_LIBRARY_LABELS,
    REACT_HOOK_FORM,
    TANSTACK_FORM,
)
from form_builder.jsx import ControlBinding, element, js_literal, js_string, jsx_comment, jsx_text
from form_builder.models.field_definitions import FieldDescriptor, FieldList, column_span, iter_fields
from form_builder.schema import derive_defaults, derive_validation
from form_builder.variants import Import, Snippet, get_handler

logger = logging.getLogger(__name__)

COMPONENT_NAME = "MyForm"
FORM_CLASS = "space-y-8 max-w-3xl mx-auto py-10"
MAX_IMPORT_WIDTH = 80

_BUTTON: Import = ("@/components/ui/button", "Button")
_LABEL: Import = ("@/components/ui/label", "Label")

_SUBMIT_HANDLER = [
    "function onSubmit(values: z.infer<typeof formSchema>) {",
    "  try {",
    "    console.log(values);",
    "    toast(",
    '      <pre className="mt-2 w-[340px] rounded-md bg-slate-950 p-4">',
    '        <code className="text-white">{JSON.stringify(values, null, 2)}</code>',
    "      </pre>,",
    "    );",
    "  } catch (error) {",
    '    console.error("Form submission error", error);',
    '    toast.error("Failed to submit the form. Please try again.");',
    "  }",
    "}",
]


def _indent(lines: list[str], level: int = 1) -> list[str]:
    pad = "  " * level
    return [f"{pad}{line}" if line else "" for line in lines]


def _import_line(module: str, names: list[str]) -> list[str]:
    line = f"import {{ {', '.join(names)} }} from {js_string(module)};"
    if len(line) <= MAX_IMPORT_WIDTH:
        return [line]
    return ["import {", *[f"  {name}," for name in names], f"}} from {js_string(module)};"]


def _object_literal(prefix: str, values: dict[str, Any], suffix: str) -> list[str]:
    """Lines for ``prefix{...}suffix`` where the object keys are identifiers."""
    if not values:
        return [f"{prefix}{{}}{suffix}"]
    entries = [f"  {key}: {js_literal(value)}," for key, value in values.items()]
    return [f"{prefix}{{", *entries, f"}}{suffix}"]


def unsupported_placeholder(f: FieldDescriptor) -> list[str]:
    return [jsx_comment(f'Unsupported field type: "{f.variant}" ({f.name})')]


class CodeTarget:
    """Base generator; subclasses wire controls to one form library."""

    library: str = ""
    framework_imports: list[Import] = []
    react_imports: list[str] = []
    ui_imports: list[Import] = [_BUTTON]
    # Nesting of the field blocks under the form wrapper
    body_depth = 1

    @property
    def label(self) -> str:
        return FORM_LIBRARY_LABELS[self.library]

    def binding_for(self, f: FieldDescriptor) -> ControlBinding:
        raise NotImplementedError

    def field_block(self, f: FieldDescriptor, control: list[str]) -> list[str]:
        raise NotImplementedError

    def setup_lines(self, defaults: dict[str, Any]) -> list[str]:
        raise NotImplementedError

    def form_open(self) -> list[str]:
        raise NotImplementedError

    def form_close(self) -> list[str]:
        raise NotImplementedError

    def snippet_for(self, f: FieldDescriptor) -> Snippet | None:
        """The control snippet for ``f``, or None when it must degrade to a placeholder."""
        handler = get_handler(f.variant)
        if handler is None:
            logger.warning(f"No code template for variant '{f.variant}' (field {f.name})")
            return None
        try:
            return handler.generate_snippet(f, self.binding_for(f))
        except Exception as e:
            logger.warning(f"Code generation failed for field {f.name} ({f.variant}): {e}")
            return None

    def generate(self, fields: FieldList) -> str:
        """Generate the formatted component source for ``fields``."""
        spec = derive_validation(fields)
        defaults = derive_defaults(fields)
        snippets = {f.name: self.snippet_for(f) for f in iter_fields(fields)}
        present = [s for s in snippets.values() if s is not None]

        w = CodeWriter()
        w.line('"use client";')
        w.blank()
        w.lines(self._imports(present))
        w.blank()

        module_setup = [line for s in present for line in s.module_setup]
        if module_setup:
            w.lines(module_setup)
            w.blank()

        w.lines(schema_declaration(spec))
        w.blank()

        with w.block(f"export default function {COMPONENT_NAME}() {{", "}"):
            component_setup = [line for s in present for line in s.component_setup]
            if component_setup:
                w.lines(component_setup)
                w.blank()
            w.lines(self.setup_lines(defaults))
            w.blank()
            w.lines(_SUBMIT_HANDLER)
            w.blank()
            with w.block("return (", ");"):
                w.lines(self.form_open())
                body = [line for item in fields for line in self._item_lines(item, snippets)]
                body.append('<Button type="submit">Submit</Button>')
                w.lines(_indent(body, self.body_depth))
                w.lines(self.form_close())

        return format_source(w.getvalue())

    def _control_lines(self, f: FieldDescriptor, snippets: dict[str, Snippet | None]) -> list[str]:
        snippet = snippets.get(f.name)
        if snippet is None:
            return unsupported_placeholder(f)
        return self.field_block(f, snippet.jsx)

    def _item_lines(self, item: Any, snippets: dict[str, Snippet | None]) -> list[str]:
        if not isinstance(item, list):
            return self._control_lines(item, snippets)
        span = column_span(len(item))
        columns = []
        for member in item:
            columns += element("div", [f'className="col-span-{span}"'], self._control_lines(member, snippets))
        return element("div", ['className="grid grid-cols-12 gap-4"'], columns)

    def _imports(self, snippets: list[Snippet]) -> list[str]:
        react = sorted({*self.react_imports, *(name for s in snippets for name in s.react_imports)})
        lines = []
        if react:
            lines += _import_line("react", react)
        lines += _import_line("sonner", ["toast"])
        for module, names in _group_imports(self.framework_imports):
            lines += _import_line(module, names)
        lines += _import_line("zod", ["z"])

        ui = [*self.ui_imports, *(imp for s in snippets for imp in s.imports)]
        for module, names in sorted(_group_imports(ui)):
            lines += _import_line(module, names)
        return lines


def _group_imports(imports: list[Import]) -> list[tuple[str, list[str]]]:
    """Merge imports by module, keeping first-seen module order and sorting names."""
    grouped: dict[str, set[str]] = {}
    for module, name in imports:
        grouped.setdefault(module, set()).add(name)
    return [(module, sorted(names)) for module, names in grouped.items()]


def _help_text(f: FieldDescriptor, tag: str, attrs: str) -> list[str]:
    if not f.description:
        return []
    return [f"<{tag}{attrs}>{jsx_text(f.description)}</{tag}>"]


class ReactHookFormTarget(CodeTarget):
    """Schema-bound forms with react-hook-form and the zod resolver."""

    library = REACT_HOOK_FORM
    body_depth = 2
    framework_imports = [
        ("react-hook-form", "useForm"),
        ("@hookform/resolvers/zod", "zodResolver"),
    ]
    ui_imports = [
        _BUTTON,
        *[
            ("@/components/ui/form", name)
            for name in ("Form", "FormControl", "FormDescription", "FormField", "FormItem", "FormLabel", "FormMessage")
        ],
    ]

    def binding_for(self, f: FieldDescriptor) -> ControlBinding:
        return ControlBinding(
            value="field.value",
            callback="field.onChange",
            call_format="field.onChange({arg})",
            blur="field.onBlur",
        )

    def field_block(self, f: FieldDescriptor, control: list[str]) -> list[str]:
        item = element("FormItem", [], [
            f"<FormLabel>{jsx_text(f.label or f.name)}</FormLabel>",
            *element("FormControl", [], control),
            *_help_text(f, "FormDescription", ""),
            "<FormMessage />",
        ])
        return [
            "<FormField",
            "  control={form.control}",
            f'  name="{f.name}"',
            "  render={({ field }) => (",
            *_indent(item, 2),
            "  )}",
            "/>",
        ]

    def setup_lines(self, defaults: dict[str, Any]) -> list[str]:
        return [
            "const form = useForm<z.infer<typeof formSchema>>({",
            "  resolver: zodResolver(formSchema),",
            *_indent(_object_literal("defaultValues: ", defaults, ",")),
            "});",
        ]

    def form_open(self) -> list[str]:
        return [
            "<Form {...form}>",
            f'  <form onSubmit={{form.handleSubmit(onSubmit)}} className="{FORM_CLASS}">',
        ]

    def form_close(self) -> list[str]:
        return ["  </form>", "</Form>"]


class TanStackFormTarget(CodeTarget):
    """Store-bound forms with @tanstack/react-form validated by the zod schema."""

    library = TANSTACK_FORM
    framework_imports = [("@tanstack/react-form", "useForm")]
    ui_imports = [_BUTTON, _LABEL]

    def binding_for(self, f: FieldDescriptor) -> ControlBinding:
        return ControlBinding(
            value="field.state.value",
            callback="(value) => field.handleChange(value)",
            call_format="field.handleChange({arg})",
            blur="field.handleBlur",
            element_id="field.name",
        )

    def field_block(self, f: FieldDescriptor, control: list[str]) -> list[str]:
        body = element("div", ['className="space-y-2"'], [
            f"<Label htmlFor={{field.name}}>{jsx_text(f.label or f.name)}</Label>",
            *control,
            *_help_text(f, "p", ' className="text-sm text-muted-foreground"'),
            "{field.state.meta.errors.length > 0 ? (",
            '  <p className="text-sm font-medium text-destructive">',
            '    {field.state.meta.errors.map((error) => (typeof error === "string" ? error : error?.message)).join(", ")}',
            "  </p>",
            ") : null}",
        ])
        return [
            "<form.Field",
            f'  name="{f.name}"',
            "  children={(field) => (",
            *_indent(body, 2),
            "  )}",
            "/>",
        ]

    def setup_lines(self, defaults: dict[str, Any]) -> list[str]:
        return [
            "const form = useForm({",
            *_indent(_object_literal("defaultValues: ", defaults, " as z.infer<typeof formSchema>,")),
            "  validators: {",
            "    onChange: formSchema,",
            "  },",
            "  onSubmit: async ({ value }) => {",
            "    onSubmit(value);",
            "  },",
            "});",
        ]

    def form_open(self) -> list[str]:
        return [
            "<form",
            "  onSubmit={(e) => {",
            "    e.preventDefault();",
            "    e.stopPropagation();",
            "    form.handleSubmit();",
            "  }}",
            f'  className="{FORM_CLASS}"',
            ">",
        ]

    def form_close(self) -> list[str]:
        return ["</form>"]


class BringYourOwnTarget(CodeTarget):
    """Plain React state with ``formSchema.safeParse`` on submit."""

    library = BRING_YOUR_OWN
    react_imports = ["useState"]
    ui_imports = [_BUTTON, _LABEL]

    def binding_for(self, f: FieldDescriptor) -> ControlBinding:
        key = js_string(f.name)
        return ControlBinding(
            value=f"values.{f.name}",
            callback=f"(value) => setFieldValue({key}, value)",
            call_format=f"setFieldValue({key}, {{arg}})",
            element_id=key,
        )

    def field_block(self, f: FieldDescriptor, control: list[str]) -> list[str]:
        return element("div", ['className="space-y-2"'], [
            f"<Label htmlFor={js_string(f.name)}>{jsx_text(f.label or f.name)}</Label>",
            *control,
            *_help_text(f, "p", ' className="text-sm text-muted-foreground"'),
            f"{{errors.{f.name} && (",
            f'  <p className="text-sm font-medium text-destructive">{{errors.{f.name}}}</p>',
            ")}",
        ])

    def setup_lines(self, defaults: dict[str, Any]) -> list[str]:
        return [
            *_object_literal("const [values, setValues] = useState<z.infer<typeof formSchema>>(", defaults, ");"),
            "const [errors, setErrors] = useState<Record<string, string>>({});",
            "",
            "function setFieldValue(name: string, value: unknown) {",
            "  setValues((current) => ({ ...current, [name]: value }));",
            "}",
            "",
            "function handleSubmit(e: React.FormEvent<HTMLFormElement>) {",
            "  e.preventDefault();",
            "  const result = formSchema.safeParse(values);",
            "  if (!result.success) {",
            "    const fieldErrors: Record<string, string> = {};",
            "    for (const issue of result.error.issues) {",
            "      fieldErrors[String(issue.path[0])] = issue.message;",
            "    }",
            "    setErrors(fieldErrors);",
            "    return;",
            "  }",
            "  setErrors({});",
            "  onSubmit(result.data);",
            "}",
        ]

    def form_open(self) -> list[str]:
        return [f'<form onSubmit={{handleSubmit}} className="{FORM_CLASS}">']

    def form_close(self) -> list[str]:
        return ["</form>"]


TARGETS: dict[str, CodeTarget] = {
    target.library: target
    for target in (ReactHookFormTarget(), TanStackFormTarget(), BringYourOwnTarget())
}
