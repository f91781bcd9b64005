"""
Form Builder Demo - Review Form JSON

This Gradio app demonstrates the form builder by:
1. Reviewing pasted form JSON locally (preview, JSON, schema and code)
2. Adding fields through a running builder API (run_web_server.py)
3. Showing the generated code for the API's current form
"""

import asyncio
import json
import logging

import gradio as gr
import httpx

from form_builder.constants import FIELD_TYPES, FORM_LIBRARIES, REACT_HOOK_FORM
from form_builder.review import review_form_json

logging.basicConfig(level=logging.INFO)

# Default builder API URL (python run_web_server.py)
DEFAULT_API_URL = "http://localhost:9110"

SAMPLE_JSON = json.dumps(
    [
        {"variant": "Input", "name": "name_1", "label": "Username", "required": True},
        [
            {"variant": "Input", "name": "first_name", "label": "First name"},
            {"variant": "Input", "name": "last_name", "label": "Last name"},
        ],
        {"variant": "Checkbox", "name": "terms", "label": "Accept terms", "required": True},
    ],
    indent=2,
)


def review(form_json: str, library: str):
    """Preview pasted form JSON."""
    result = review_form_json(form_json, library)
    if not result.ok:
        return f"❌ **Invalid JSON**\n\n{result.error}", "", "", {}, ""

    artifacts = result.artifacts
    notice = ""
    if artifacts.special_components:
        names = ", ".join(c["component"] for c in artifacts.special_components)
        notice = f"\n\nThis form includes special components, add them to your project: {names}"
    return (
        f"✅ Form with {len(artifacts.defaults)} fields{notice}",
        artifacts.rendered.to_html(),
        artifacts.json_text,
        artifacts.schema.to_json_schema(),
        artifacts.code,
    )


async def add_field(api_url: str, variant: str):
    """Add a field through the builder API and return the updated preview."""
    try:
        async with httpx.AsyncClient(base_url=api_url, timeout=10.0) as client:
            response = await client.post("/api/fields", json={"variant": variant})
            if response.status_code != 201:
                return f"❌ Server error: {response.status_code} {response.text}", ""
            preview = await client.get("/api/preview")
            data = preview.json()
            return f"✅ Added {variant} field `{response.json()['field']['name']}`", data["code"]
    except httpx.ConnectError:
        return "❌ Could not connect to the builder API. Start it with `python run_web_server.py`.", ""


async def reset_form(api_url: str):
    """Clear the API's field list."""
    try:
        async with httpx.AsyncClient(base_url=api_url, timeout=10.0) as client:
            await client.post("/api/reset")
            return "✅ Form reset", ""
    except httpx.ConnectError:
        return "❌ Could not connect to the builder API.", ""


def sync_add_field(api_url, variant):
    return asyncio.run(add_field(api_url, variant))


def sync_reset_form(api_url):
    return asyncio.run(reset_form(api_url))


with gr.Blocks(title="Form Builder Demo") as demo:
    gr.Markdown("""
# 📝 Form Builder Demo

**How it works:**
1. Paste form JSON exported from the builder (JSON view)
2. Pick a form library
3. Click "Preview form" → see the form, its JSON, schema and generated code
    """)

    with gr.Tab("🔍 Review Form JSON"):
        with gr.Row():
            with gr.Column(scale=1):
                json_input = gr.Code(label="Form JSON", language="json", value=SAMPLE_JSON)
                library_input = gr.Dropdown(
                    choices=list(FORM_LIBRARIES),
                    value=REACT_HOOK_FORM,
                    label="Form library",
                )
                review_btn = gr.Button("Preview form", variant="primary", size="lg")

            with gr.Column(scale=1):
                status_md = gr.Markdown()
                with gr.Tab("Preview"):
                    preview_html = gr.HTML()
                with gr.Tab("JSON"):
                    json_output = gr.Code(language="json")
                with gr.Tab("Schema"):
                    schema_output = gr.JSON()
                with gr.Tab("Code"):
                    code_output = gr.Code(language="typescript")

        review_btn.click(
            fn=review,
            inputs=[json_input, library_input],
            outputs=[status_md, preview_html, json_output, schema_output, code_output],
        )

    with gr.Tab("🧱 Builder API"):
        with gr.Row():
            with gr.Column(scale=1):
                api_url_input = gr.Textbox(label="Builder API URL", value=DEFAULT_API_URL)
                variant_input = gr.Dropdown(choices=FIELD_TYPES, value="Input", label="Field type")
                add_btn = gr.Button("Add field", variant="primary")
                reset_btn = gr.Button("Reset", variant="secondary")

            with gr.Column(scale=1):
                api_status = gr.Markdown()
                api_code = gr.Code(label="Generated code", language="typescript")

        add_btn.click(fn=sync_add_field, inputs=[api_url_input, variant_input], outputs=[api_status, api_code])
        reset_btn.click(fn=sync_reset_form, inputs=api_url_input, outputs=[api_status, api_code])


if __name__ == "__main__":
    demo.launch(server_name="0.0.0.0", server_port=7860)
