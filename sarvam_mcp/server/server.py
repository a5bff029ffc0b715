"""
Sarvam AI MCP Server.

Transport: stdio by default, SSE on request.

Tools that call the Sarvam API return the adapter envelope:
{
    "ok": bool,
    "results": Any,          # Present if ok is True
    "error": str,            # Present if ok is False
    "details": str           # Present if ok is False
}

The documentation tool returns the retrieval shape:
{
    "retrieved_file_path": str | None,
    "file_content": str | None,
    "status_message": str,
    "error_message": str | None
}
"""

import argparse
import logging
import os
import sys
import signal
from typing import Any, Dict, List, Literal, Optional, Annotated

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations

from sarvam_agents.common.config import load_config
from sarvam_agents.retriever import DocsRetriever
from sarvam_mcp.adapter import SarvamAPIAdapter

logger = logging.getLogger("sarvam.mcp")

DEFAULT_SERVER_NAME = "sarvam_mcp_server"


class AnalyticsQuestion(BaseModel):
    """One question for text or call analytics"""
    id: str = Field(description="Unique identifier for the question.")
    text: str = Field(description="The question text.")
    description: Optional[str] = Field(default=None, description="Optional description for the question.")
    type: Literal["boolean", "enum", "short answer", "long answer", "number"] = Field(
        description="Type of answer expected."
    )
    properties: Optional[Dict[str, Any]] = Field(
        default=None, description='Additional properties, e.g. options for enum type: {"options": ["yes", "no"]}.'
    )


def _questions_payload(questions: List[AnalyticsQuestion]) -> List[Dict[str, Any]]:
    return [q.model_dump(exclude_none=True) for q in questions]


class MCPServerApp:
    """
    Main application class for the MCP server.

    Wires the Sarvam API adapter and the local documentation retriever into
    named MCP tools.
    """
    def __init__(
            self,
            sarvam_adapter: SarvamAPIAdapter,
            docs_retriever: DocsRetriever,
            mcp_server_name: str = DEFAULT_SERVER_NAME,
        ) -> None:
        """
        Initializes the MCPServerApp.
        Args:
            sarvam_adapter (SarvamAPIAdapter): Adapter for the Sarvam REST API.
            docs_retriever (DocsRetriever): Local documentation retriever.
            mcp_server_name (str): The name of the MCP server.
        """
        self.sarvam = sarvam_adapter
        self.docs = docs_retriever
        self.mcp = FastMCP(name=mcp_server_name)

        # ---------- MCP Tools: Documentation Retrieval ---------- #
        @self.mcp.tool(
            name="get_sarvam_documentation_file",
            description=(
                "Retrieves the full content of the single most relevant Sarvam AI markdown documentation file. "
                "Searches local documentation (e.g., in 'api-ref', 'cookbook') based on keywords, a topic, or a filename."
            ),
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False)
        )
        async def tool_get_documentation_file(
            search_term: Annotated[str, Field(
                min_length=1,
                description=(
                    "Keywords, a topic description (e.g., 'how to use transliteration api', 'pdf parsing options'), "
                    "or a partial/full filename (e.g., 'sarvam-parse.md', 'transliterate'). "
                    "The tool will attempt to find the single most relevant documentation file."
                ),
            )],
            doc_area: Annotated[Optional[str], Field(description=(
                "Optional. Documentation area to narrow the search: 'api-ref' (API endpoint details), "
                "'cookbook' (usage guides and examples), 'docs-section' (conceptual documents). "
                "If omitted, common areas are searched."
            ))] = None,
        ) -> Dict[str, Any]:
            """
            MCP tool to retrieve one documentation file.
            Calls self.docs.retrieve(...) and returns its wire shape.
            """
            return self.docs.retrieve(search_term, doc_area=doc_area, context={"tool": "get_sarvam_documentation_file"}).to_dict()

        # ---------- MCP Tools: Translate ---------- #
        @self.mcp.tool(
            name="translate_text",
            description="Translate input text to the target language.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False, openWorldHint=True)
        )
        async def tool_translate_text(
            input: Annotated[str, Field(description="The text to be translated.")],
            source_language_code: Annotated[str, Field(description="The source language code.")] = "en-IN",
            target_language_code: Annotated[str, Field(description="The target language code.")] = "hi-IN",
            speaker_gender: Annotated[Optional[str], Field(description="The gender of the speaker.")] = "Male",
            mode: Annotated[Optional[str], Field(description="The mode of translation.")] = "formal",
            model: Annotated[Optional[str], Field(description="The model to be used for translation.")] = "mayura:v1",
            enable_preprocessing: Annotated[Optional[bool], Field(description="Whether to enable preprocessing.")] = True,
        ) -> Dict[str, Any]:
            return await self.sarvam.call_translate(
                input=input,
                source_language_code=source_language_code,
                target_language_code=target_language_code,
                speaker_gender=speaker_gender,
                mode=mode,
                model=model,
                enable_preprocessing=enable_preprocessing,
            )

        # ---------- MCP Tools: Transliterate ---------- #
        @self.mcp.tool(
            name="transliterate_text",
            description="Transliterates text from one script to another using Sarvam API, preserving pronunciation.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False, openWorldHint=True)
        )
        async def tool_transliterate_text(
            input_text: Annotated[str, Field(max_length=1000, description="The text to transliterate (<=1000 characters).")],
            source_language_code: Annotated[str, Field(description="Language code of the input text (e.g., en-IN, hi-IN).")],
            target_language_code: Annotated[str, Field(description="Language code for the transliterated text (e.g., en-IN, hi-IN).")],
            numerals_format: Annotated[Optional[Literal["international", "native"]], Field(
                description="Optional. Numerals format: 'international' (default) or 'native'.")] = None,
            spoken_form_numerals_language: Annotated[Optional[Literal["english", "native"]], Field(
                description="Optional. 'english' or 'native' (default). Only works if spoken_form is true.")] = None,
            spoken_form: Annotated[Optional[bool], Field(
                description="Optional. Converts text to natural spoken form if true.")] = None,
        ) -> Dict[str, Any]:
            return await self.sarvam.call_transliterate(
                input_text=input_text,
                source_language_code=source_language_code,
                target_language_code=target_language_code,
                numerals_format=numerals_format,
                spoken_form_numerals_language=spoken_form_numerals_language,
                spoken_form=spoken_form,
            )

        # ---------- MCP Tools: Language Identification ---------- #
        @self.mcp.tool(
            name="identify_language",
            description="Identifies the language and script of the input text using Sarvam API.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False, openWorldHint=True)
        )
        async def tool_identify_language(
            input_text: Annotated[str, Field(description="The text input for language and script identification.")],
        ) -> Dict[str, Any]:
            return await self.sarvam.call_identify_language(input_text=input_text)

        # ---------- MCP Tools: Text to Speech ---------- #
        @self.mcp.tool(
            name="text_to_speech",
            description=(
                "Convert text inputs to speech using Sarvam API. If output_path is provided, saves audio to a WAV file "
                "and returns a success message. Otherwise, returns the API response with base64 audio."
            ),
            annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True)
        )
        async def tool_text_to_speech(
            inputs: Annotated[str, Field(description="The text input(s) to be converted to speech.")],
            target_language_code: Annotated[str, Field(description="The target language code for the speech.")] = "hi-IN",
            speaker: Annotated[str, Field(description="The speaker's name for the voice.")] = "meera",
            pitch: Annotated[float, Field(description="The pitch of the speech.")] = 0,
            pace: Annotated[float, Field(description="The pace of the speech.")] = 1.65,
            loudness: Annotated[float, Field(description="The loudness of the speech.")] = 1.5,
            speech_sample_rate: Annotated[int, Field(description="The sample rate for the speech.")] = 8000,
            enable_preprocessing: Annotated[bool, Field(description="Whether to enable preprocessing.")] = True,
            model: Annotated[str, Field(description="The model to be used for conversion.")] = "bulbul:v1",
            output_path: Annotated[Optional[str], Field(description=(
                "Optional. Full path (including filename and .wav extension) where the audio file should be saved."
            ))] = None,
        ) -> Dict[str, Any]:
            if output_path is not None and not output_path.lower().endswith(".wav"):
                raise ToolError(f"output_path must end with .wav, got: {output_path}")
            return await self.sarvam.call_text_to_speech(
                inputs=inputs,
                target_language_code=target_language_code,
                speaker=speaker,
                pitch=pitch,
                pace=pace,
                loudness=loudness,
                speech_sample_rate=speech_sample_rate,
                enable_preprocessing=enable_preprocessing,
                model=model,
                output_path=output_path,
            )

        # ---------- MCP Tools: Speech to Text ---------- #
        @self.mcp.tool(
            name="speech_to_text",
            description="Transcribe audio input to text using Sarvam speech-to-text models.",
            annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True)
        )
        async def tool_speech_to_text(
            language_code: Annotated[str, Field(description="The language code of the audio input.")],
            model: Annotated[str, Field(description="The model to use for transcription.")],
            file: Annotated[str, Field(description="The path to the audio file to transcribe.")],
            save_response: Annotated[bool, Field(description="Whether to save the response to a file.")] = False,
        ) -> Dict[str, Any]:
            return await self.sarvam.call_speech_to_text(
                language_code=language_code, model=model, file=file, save_response=save_response
            )

        # ---------- MCP Tools: Speech to Text Translate ---------- #
        @self.mcp.tool(
            name="speech_to_text_translate",
            description="Convert speech to text in target language.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False, openWorldHint=True)
        )
        async def tool_speech_to_text_translate(
            file: Annotated[str, Field(description="The path to the audio file to be processed.")],
            model: Annotated[str, Field(description="The model to use for the translation.")] = "saaras:v2",
            with_diarization: Annotated[bool, Field(description="Whether to enable speaker diarization.")] = False,
        ) -> Dict[str, Any]:
            return await self.sarvam.call_speech_to_text_translate(
                file=file, model=model, with_diarization=with_diarization
            )

        # ---------- MCP Tools: PDF Parse ---------- #
        @self.mcp.tool(
            name="sarvam_parse_pdf",
            description="Parses a PDF document to extract structured data (output is base64 encoded XML). Supports English PDFs only.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False, openWorldHint=True)
        )
        async def tool_parse_pdf(
            file_path: Annotated[str, Field(description="Path to the PDF file to be parsed.")],
            page_number: Annotated[Optional[str], Field(
                description="Optional. The page number to extract data from (1-based index, defaults to 1).")] = None,
            sarvam_mode: Annotated[Optional[Literal["small", "large"]], Field(
                description="Optional. Parsing mode: 'small' (fast) or 'large' (high precision).")] = None,
            prompt_caching: Annotated[Optional[bool], Field(
                description="Optional. Whether to cache the prompt for the parse request.")] = None,
        ) -> Dict[str, Any]:
            return await self.sarvam.call_parse_pdf(
                file_path=file_path,
                page_number=page_number,
                sarvam_mode=sarvam_mode,
                prompt_caching=prompt_caching,
            )

        # ---------- MCP Tools: Document Translation ---------- #
        @self.mcp.tool(
            name="translate_document_pdf",
            description="Translates a PDF document. Supports only digital English PDFs with selectable text as input.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False, openWorldHint=True)
        )
        async def tool_translate_document_pdf(
            file_path: Annotated[str, Field(description="Path to the PDF file to be translated.")],
            output_lang: Annotated[Optional[str], Field(
                description="Optional. Target language code for translation (e.g., hi-IN, mr-IN).")] = None,
            page_number: Annotated[Optional[str], Field(
                description="Optional. Page number to translate (1-based). Empty for entire document.")] = None,
            hard_translate_dict: Annotated[Optional[Dict[str, str]], Field(
                description='Optional. Words with fixed translations, e.g., {"Hello": "नमस्कार"}.')] = None,
            input_lang: Annotated[Optional[str], Field(
                description="Optional. Input language code. Defaults to en-IN; only English PDFs are supported.")] = None,
        ) -> Dict[str, Any]:
            return await self.sarvam.call_translate_pdf(
                file_path=file_path,
                output_lang=output_lang,
                page_number=page_number,
                hard_translate_dict=hard_translate_dict,
                input_lang=input_lang,
            )

        # ---------- MCP Tools: Text Analytics ---------- #
        @self.mcp.tool(
            name="analyze_text",
            description="Performs text analysis on provided content and answers specific questions about the text using Sarvam API.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False, openWorldHint=True)
        )
        async def tool_analyze_text(
            text_content: Annotated[str, Field(description="The text content to be analyzed.")],
            questions: Annotated[List[AnalyticsQuestion], Field(
                description="List of questions to be answered based on the text content.")],
        ) -> Dict[str, Any]:
            return await self.sarvam.call_text_analytics(
                text_content=text_content, questions=_questions_payload(questions)
            )

        # ---------- MCP Tools: Call Analytics ---------- #
        @self.mcp.tool(
            name="call_analytics",
            description="Analyze call content and answer questions based on the transcript.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False, openWorldHint=True)
        )
        async def tool_call_analytics(
            file: Annotated[str, Field(description="The path to the audio file to be analyzed.")],
            questions: Annotated[List[AnalyticsQuestion], Field(description="Questions to answer about the call.")],
            hotwords: Annotated[Optional[str], Field(description="Optional comma-separated string of keywords.")] = None,
            model: Annotated[Optional[str], Field(description="Optional model to use.")] = "saaras:v2",
        ) -> Dict[str, Any]:
            return await self.sarvam.call_call_analytics(
                file=file, questions=_questions_payload(questions), hotwords=hotwords, model=model
            )

    def run(self, transport: str = "stdio", host: str = "127.0.0.1", port: int = 8000) -> None:
        """Runs the MCP server using the given transport."""
        if transport == "stdio":
            self.mcp.run(transport="stdio")
        else:
            self.mcp.run(transport=transport, host=host, port=port)


def main(argv: Optional[List[str]] = None) -> None:
    load_dotenv()
    config = load_config()

    parser = argparse.ArgumentParser(description="Run the Sarvam AI MCP server.")
    parser.add_argument(
        "--transport",
        default=os.getenv("MCP_TRANSPORT", "stdio"),
        choices=("stdio", "sse"),
        help="MCP transport.",
    )
    parser.add_argument("--host", default=os.getenv("MCP_HOST", "127.0.0.1"), help="Bind host for SSE.")
    parser.add_argument("--port", type=int, default=int(os.getenv("MCP_PORT", "8000")), help="Bind port for SSE.")
    parser.add_argument(
        "--server-name",
        default=os.getenv("MCP_SERVER_NAME", DEFAULT_SERVER_NAME),
        help="Advertised MCP server name.",
    )
    parser.add_argument("--docs-root", default=config.docs.root, help="Documentation root directory.")
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
    )
    args = parser.parse_args(argv)

    # stdout carries the stdio transport, so logs go to stderr
    logging.basicConfig(
        level=args.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config.docs.root = args.docs_root
    if not config.api.api_key:
        logger.warning("SARVAM_API_KEY is not set - Sarvam API tools will return errors")
    logger.info(f"Serving documentation from {config.docs.root}")

    app = MCPServerApp(
        sarvam_adapter=SarvamAPIAdapter(
            api_key=config.api.api_key,
            base_url=config.api.base_url,
            timeout=config.api.timeout,
            responses_dir=config.responses_dir,
        ),
        docs_retriever=DocsRetriever.from_config(config.docs),
        mcp_server_name=args.server_name,
    )

    def _handle_shutdown(signum, frame):
        raise SystemExit(0)
    for sig in (signal.SIGINT, getattr(signal, "SIGTERM", None)):
        if sig is not None:
            signal.signal(sig, _handle_shutdown)

    app.run(transport=args.transport, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
