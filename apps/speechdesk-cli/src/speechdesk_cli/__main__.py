"""Entry point for speechdesk-cli."""

from __future__ import annotations

import argparse
import sys

import httpx
from rich.console import Console
from rich.table import Table

from .audio import decode_audio, save_audio
from .client import SpeechdeskClient, SpeechdeskError
from .config import settings
from .voice_settings import VoiceSettings, pick_default_voice, settings_for_voice

console = Console()


def _voice_settings(client: SpeechdeskClient, args: argparse.Namespace) -> VoiceSettings | None:
    """Settings from the command line, or None to let the server use its defaults."""
    voice_name = args.voice or settings.voice_name
    if not voice_name:
        return None
    voices = {v["name"]: v for v in client.list_voices(language_code=args.language_code)}
    if voice_name not in voices:
        raise SpeechdeskError(400, f"Unknown voice: {voice_name}")
    return settings_for_voice(voices[voice_name], args.rate, args.pitch)


def cmd_voices(client: SpeechdeskClient, args: argparse.Namespace) -> None:
    table = Table("Name", "Languages", "Gender", "Sample rate")
    for v in client.list_voices(language_code=args.language_code):
        table.add_row(v["name"], ", ".join(v["language_codes"]), v["ssml_gender"], str(v["natural_sample_rate_hertz"]))
    console.print(table)


def cmd_preview(client: SpeechdeskClient, args: argparse.Namespace) -> None:
    voice_settings = _voice_settings(client, args)
    if voice_settings is None:
        voice = pick_default_voice(client.list_voices(language_code=args.language_code))
        if voice is None:
            raise SpeechdeskError(404, "No voices available")
        voice_settings = settings_for_voice(voice, args.rate, args.pitch)
    audio = decode_audio(client.preview(voice_settings, text=args.text))
    path = save_audio(audio, args.out)
    console.print(f"Preview of [bold]{voice_settings.voice_name}[/bold] saved to {path}")


def cmd_say(client: SpeechdeskClient, args: argparse.Namespace) -> None:
    speech = client.create_speech(args.text, _voice_settings(client, args))
    console.print(f"Saved speech [bold]{speech['id']}[/bold]: {speech['audio_url']}")
    if args.out and speech.get("audio_url"):
        path = save_audio(client.download_audio(speech["audio_url"]), args.out)
        console.print(f"Audio written to {path}")


def cmd_list(client: SpeechdeskClient, args: argparse.Namespace) -> None:
    table = Table("ID", "Text", "Voice", "Saved", "Audio")
    for s in client.list_speeches():
        table.add_row(str(s["id"]), s["text"], s.get("voice_name") or "-", s["created_at"], s["audio_url"] or "-")
    console.print(table)


def cmd_delete(client: SpeechdeskClient, args: argparse.Namespace) -> None:
    client.delete_speech(args.id)
    console.print(f"Deleted speech {args.id}")


def _add_voice_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--voice", help="Voice name, e.g. en-US-Standard-C")
    p.add_argument("--language-code", help="Language code, e.g. en-US")
    p.add_argument("--rate", type=float, default=1.0, help="Speaking rate (0.25 - 4.0)")
    p.add_argument("--pitch", type=float, default=0.0, help="Pitch in semitones (-20 - 20)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="speechdesk CLI - text to speech")
    parser.add_argument("--server", help="Server URL")
    sub = parser.add_subparsers(dest="command", help="Command")

    voices_cmd = sub.add_parser("voices", help="List available voices")
    voices_cmd.add_argument("--language-code", help="Only voices for this language")
    voices_cmd.set_defaults(func=cmd_voices)

    preview_cmd = sub.add_parser("preview", help="Preview a voice without saving")
    _add_voice_args(preview_cmd)
    preview_cmd.add_argument("--text", help="Preview text")
    preview_cmd.add_argument("--out", help="Output MP3 path (default: temp file)")
    preview_cmd.set_defaults(func=cmd_preview)

    say_cmd = sub.add_parser("say", help="Synthesize and save text")
    say_cmd.add_argument("text", help="Text or <speak>SSML</speak>")
    _add_voice_args(say_cmd)
    say_cmd.add_argument("--out", help="Also download the MP3 to this path")
    say_cmd.set_defaults(func=cmd_say)

    list_cmd = sub.add_parser("list", help="List saved speeches")
    list_cmd.set_defaults(func=cmd_list)

    delete_cmd = sub.add_parser("delete", help="Delete a saved speech")
    delete_cmd.add_argument("id", type=int)
    delete_cmd.set_defaults(func=cmd_delete)

    sub.add_parser("studio", help="Interactive studio")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "studio":
        from .studio import studio_loop

        studio_loop(server_url=args.server)
        return 0
    if args.command is None:
        parser.print_help()
        return 0

    try:
        with SpeechdeskClient(server_url=args.server) as client:
            args.func(client, args)
    except SpeechdeskError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        return 1
    except httpx.HTTPError as e:
        console.print(f"[red]Could not reach speechdesk server: {e}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
