# Summary of file: Sarvam REST API Adapter (Sarvam APIs Caller)

from typing import Any, Dict, List, Optional, Tuple
import base64
import io
import json
import logging
import os
import wave
from datetime import datetime, timezone
from pathlib import Path

import httpx

from sarvam_agents.common.language import map_language_code

logger = logging.getLogger("sarvam.adapter")

DEFAULT_BASE_URL = "https://api.sarvam.ai"
API_KEY_HEADER = "api-subscription-key"


class SarvamAPIError(Exception):
    """Non-2xx response from the Sarvam API."""

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body
        detail = body if isinstance(body, str) else json.dumps(body, indent=2)
        super().__init__(f"HTTP {status_code}: {detail}")


class SarvamInputError(Exception):
    """A local input (file, parameter) was rejected before any request was sent."""

    def __init__(self, error: str, details: str):
        super().__init__(details)
        self.error = error
        self.details = details


def _require_readable(path: str, kind: str) -> None:
    """Raise SarvamInputError unless path is a readable file."""
    if not path or not os.path.isfile(path) or not os.access(path, os.R_OK):
        raise SarvamInputError(
            f"{kind} file is not accessible or does not exist.",
            f"Cannot read {path!r}",
        )


def _pcm_frames(chunk: bytes) -> Tuple[bytes, Optional[int]]:
    """PCM frames and sample rate of a WAV chunk; raw PCM passes through."""
    if chunk[:4] != b"RIFF":
        return chunk, None
    with wave.open(io.BytesIO(chunk), "rb") as wav:
        return wav.readframes(wav.getnframes()), wav.getframerate()


def write_wav(audios: List[str], output_path: str, sample_rate: int) -> None:
    """
    Decode base64 audio chunks and write them as one 16-bit mono WAV file.

    Args:
        audios: Base64 audio chunks as returned by text-to-speech
        output_path: Destination .wav path (parent directories are created)
        sample_rate: Fallback sample rate when chunks are raw PCM
    """
    frames = []
    rate = sample_rate
    for chunk in audios:
        pcm, chunk_rate = _pcm_frames(base64.b64decode(chunk))
        frames.append(pcm)
        rate = chunk_rate or rate

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with wave.open(output_path, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(rate)
        wav.writeframes(b"".join(frames))


class SarvamAPIAdapter:
    """
    Adapter class to interact with the Sarvam REST API.

    call_* methods never raise: they return {"ok": True, "results": ...}
    or {"ok": False, "error": ..., "details": ...}. invoke_* methods do the
    actual request and raise on failure.
    """

    def __init__(
            self,
            api_key: Optional[str],
            base_url: str = DEFAULT_BASE_URL,
            timeout: float = 60.0,
            responses_dir: Optional[str] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None,
        ):
        """
        Initializes the SarvamAPIAdapter.

        Args:
            api_key (str): Sarvam API subscription key.
            base_url (str): API base URL.
            timeout (float): Request timeout in seconds.
            responses_dir (str, optional): Where speech-to-text responses are saved on request.
            transport (httpx.AsyncBaseTransport, optional): Custom transport (tests use httpx.MockTransport).
        """
        self.api_key = api_key or ""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.responses_dir = Path(responses_dir) if responses_dir else Path.cwd() / "responses"
        self._transport = transport

    #------------------- Plumbing ------------------#

    async def _post(
            self,
            path: str,
            json_body: Optional[Dict[str, Any]] = None,
            data: Optional[Dict[str, Any]] = None,
            files: Optional[Dict[str, Any]] = None,
        ) -> Any:
        """POST to the API and return the decoded body (JSON, or text if not JSON)."""
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
            headers={API_KEY_HEADER: self.api_key},
        ) as client:
            response = await client.post(path, json=json_body, data=data, files=files)

        try:
            body = response.json()
        except ValueError:
            body = response.text

        if not response.is_success:
            logger.error(f"API Error Response ({response.status_code}) from {path}: {body}")
            raise SarvamAPIError(response.status_code, body)
        return body

    async def _call(self, action: str, invoke, **kwargs) -> Dict[str, Any]:
        """Run an invoke_* coroutine and wrap the outcome in the ok/error envelope."""
        if not self.api_key:
            logger.error("SARVAM_API_KEY is not set")
            return {
                "ok": False,
                "error": "SARVAM_API_KEY is not set",
                "details": "Please make sure you have set the SARVAM_API_KEY environment variable with your Sarvam API key.",
            }
        try:
            results = await invoke(**kwargs)
            return {"ok": True, "results": results}
        except SarvamInputError as e:
            logger.error(f"{e.error} {e.details}")
            return {"ok": False, "error": e.error, "details": e.details}
        except (SarvamAPIError, httpx.HTTPError, OSError, ValueError, wave.Error, EOFError) as e:
            logger.error(f"Error {action}: {e!r}")
            return {"ok": False, "error": f"An error occurred while {action}.", "details": str(e) or repr(e)}

    #------------------- Translate ------------------#

    async def call_translate(self, **kwargs) -> Dict[str, Any]:
        return await self._call("translating text", self.invoke_translate, **kwargs)

    async def invoke_translate(
            self,
            input: str,
            source_language_code: str = "en-IN",
            target_language_code: str = "hi-IN",
            speaker_gender: Optional[str] = "Male",
            mode: Optional[str] = "formal",
            model: Optional[str] = "mayura:v1",
            enable_preprocessing: Optional[bool] = True,
        ) -> Any:
        payload = {
            "input": input,
            "source_language_code": map_language_code(source_language_code),
            "target_language_code": map_language_code(target_language_code),
        }
        optional = {
            "speaker_gender": speaker_gender,
            "mode": mode,
            "model": model,
            "enable_preprocessing": enable_preprocessing,
        }
        payload.update({k: v for k, v in optional.items() if v is not None})
        return await self._post("/translate", json_body=payload)

    #------------------- Transliterate ------------------#

    async def call_transliterate(self, **kwargs) -> Dict[str, Any]:
        return await self._call("transliterating text", self.invoke_transliterate, **kwargs)

    async def invoke_transliterate(
            self,
            input_text: str,
            source_language_code: str,
            target_language_code: str,
            numerals_format: Optional[str] = None,
            spoken_form_numerals_language: Optional[str] = None,
            spoken_form: Optional[bool] = None,
        ) -> Any:
        payload = {
            "input": input_text,
            "source_language_code": source_language_code,
            "target_language_code": target_language_code,
        }
        optional = {
            "numerals_format": numerals_format,
            "spoken_form_numerals_language": spoken_form_numerals_language,
            "spoken_form": spoken_form,
        }
        payload.update({k: v for k, v in optional.items() if v is not None})
        return await self._post("/transliterate", json_body=payload)

    #------------------- Language Identification ------------------#

    async def call_identify_language(self, **kwargs) -> Dict[str, Any]:
        return await self._call("identifying the language", self.invoke_identify_language, **kwargs)

    async def invoke_identify_language(self, input_text: str) -> Any:
        if not input_text:
            raise SarvamInputError(
                "Missing required parameter: input_text",
                "The input_text parameter is required for language identification.",
            )
        return await self._post("/text-lid", json_body={"input": input_text})

    #------------------- Text to Speech ------------------#

    async def call_text_to_speech(self, **kwargs) -> Dict[str, Any]:
        return await self._call("converting text to speech", self.invoke_text_to_speech, **kwargs)

    async def invoke_text_to_speech(
            self,
            inputs: str,
            target_language_code: str = "hi-IN",
            speaker: str = "meera",
            pitch: float = 0,
            pace: float = 1.65,
            loudness: float = 1.5,
            speech_sample_rate: int = 8000,
            enable_preprocessing: bool = True,
            model: str = "bulbul:v1",
            output_path: Optional[str] = None,
        ) -> Any:
        """
        Convert text to speech. With output_path the audio is written to a WAV
        file and a confirmation string is returned; otherwise the raw response
        (base64 audio) is returned.
        """
        if output_path is not None and not output_path.strip():
            raise SarvamInputError(
                "Invalid output_path",
                "output_path must be a non-empty string if provided.",
            )

        response = await self._post("/text-to-speech", json_body={
            "text": inputs,
            "target_language_code": map_language_code(target_language_code),
            "speaker": speaker,
            "pitch": pitch,
            "pace": pace,
            "loudness": loudness,
            "speech_sample_rate": speech_sample_rate,
            "enable_preprocessing": enable_preprocessing,
            "model": model,
        })
        if output_path is None:
            return response

        audios = response.get("audios") if isinstance(response, dict) else None
        if not audios:
            raise SarvamInputError(
                "No audio data received from API to save.",
                "The API response did not contain any audio chunks.",
            )
        write_wav(audios, output_path, speech_sample_rate)
        logger.info(f"Saved synthesized audio to {output_path}")
        return f"Successfully saved to {output_path}"

    #------------------- Speech to Text ------------------#

    async def call_speech_to_text(self, **kwargs) -> Dict[str, Any]:
        return await self._call("transcribing audio", self.invoke_speech_to_text, **kwargs)

    async def invoke_speech_to_text(
            self,
            language_code: str,
            model: str,
            file: str,
            save_response: bool = False,
        ) -> Any:
        _require_readable(file, "Audio")
        with open(file, "rb") as audio:
            data = await self._post(
                "/speech-to-text",
                data={"language_code": language_code, "model": model},
                files={"file": (os.path.basename(file), audio)},
            )

        if save_response and isinstance(data, dict):
            data["saved_to"] = str(self._save_response("stt_response", data))
        return data

    def _save_response(self, prefix: str, data: Dict[str, Any]) -> Path:
        timestamp = datetime.now(timezone.utc).isoformat().replace(":", "-")
        self.responses_dir.mkdir(parents=True, exist_ok=True)
        path = self.responses_dir / f"{prefix}_{timestamp}.json"
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info(f"Saved response to {path}")
        return path

    #------------------- Speech to Text Translate ------------------#

    async def call_speech_to_text_translate(self, **kwargs) -> Dict[str, Any]:
        return await self._call("converting speech to text", self.invoke_speech_to_text_translate, **kwargs)

    async def invoke_speech_to_text_translate(
            self,
            file: str,
            model: str = "saaras:v2",
            with_diarization: bool = False,
        ) -> Any:
        _require_readable(file, "Audio")
        with open(file, "rb") as audio:
            return await self._post(
                "/speech-to-text-translate",
                data={"model": model, "with_diarization": str(with_diarization).lower()},
                files={"file": (os.path.basename(file), audio)},
            )

    #------------------- PDF Parse ------------------#

    async def call_parse_pdf(self, **kwargs) -> Dict[str, Any]:
        return await self._call("parsing the PDF", self.invoke_parse_pdf, **kwargs)

    async def invoke_parse_pdf(
            self,
            file_path: str,
            page_number: Optional[str] = None,
            sarvam_mode: Optional[str] = None,
            prompt_caching: Optional[bool] = None,
        ) -> Any:
        _require_readable(file_path, "PDF")
        form = {}
        if page_number is not None:
            form["page_number"] = str(page_number)
        if sarvam_mode is not None:
            form["sarvam_mode"] = sarvam_mode
        if prompt_caching is not None:
            form["prompt_caching"] = str(prompt_caching).lower()
        with open(file_path, "rb") as pdf:
            return await self._post(
                "/parse/parsepdf",
                data=form,
                files={"pdf": (os.path.basename(file_path), pdf, "application/pdf")},
            )

    #------------------- Document Translation ------------------#

    async def call_translate_pdf(self, **kwargs) -> Dict[str, Any]:
        return await self._call("translating the document", self.invoke_translate_pdf, **kwargs)

    async def invoke_translate_pdf(
            self,
            file_path: str,
            output_lang: Optional[str] = None,
            page_number: Optional[str] = None,
            hard_translate_dict: Optional[Dict[str, str]] = None,
            input_lang: Optional[str] = None,
        ) -> Any:
        if not file_path or not os.path.exists(file_path):
            raise SarvamInputError("File not found", f"The file at path {file_path} does not exist.")
        _require_readable(file_path, "PDF")
        form = {}
        if output_lang is not None:
            form["output_lang"] = map_language_code(output_lang)
        if page_number is not None:
            form["page_number"] = str(page_number)
        if hard_translate_dict is not None:
            form["hard_translate_dict"] = json.dumps(hard_translate_dict, ensure_ascii=False)
        if input_lang is not None:
            form["input_lang"] = map_language_code(input_lang)
        with open(file_path, "rb") as pdf:
            return await self._post(
                "/parse/translatepdf",
                data=form,
                files={"pdf": (os.path.basename(file_path), pdf, "application/pdf")},
            )

    #------------------- Text Analytics ------------------#

    async def call_text_analytics(self, **kwargs) -> Dict[str, Any]:
        return await self._call("performing text analysis", self.invoke_text_analytics, **kwargs)

    async def invoke_text_analytics(self, text_content: str, questions: List[Dict[str, Any]]) -> Any:
        missing = [name for name, value in (("text_content", text_content), ("questions", questions)) if not value]
        if missing:
            raise SarvamInputError(
                f"Missing required parameter(s): {', '.join(missing)}",
                "Both text_content and questions parameters are required for text analysis.",
            )
        return await self._post(
            "/text-analytics",
            data={"text": text_content, "questions": json.dumps(questions, ensure_ascii=False)},
        )

    #------------------- Call Analytics ------------------#

    async def call_call_analytics(self, **kwargs) -> Dict[str, Any]:
        return await self._call("analyzing the call", self.invoke_call_analytics, **kwargs)

    async def invoke_call_analytics(
            self,
            file: str,
            questions: List[Dict[str, Any]],
            hotwords: Optional[str] = None,
            model: Optional[str] = "saaras:v2",
        ) -> Any:
        _require_readable(file, "Audio")
        form = {"questions": json.dumps(questions, ensure_ascii=False)}
        if hotwords:
            form["hotwords"] = hotwords
        if model:
            form["model"] = model
        with open(file, "rb") as audio:
            return await self._post(
                "/call-analytics",
                data=form,
                files={"file": (os.path.basename(file), audio)},
            )
