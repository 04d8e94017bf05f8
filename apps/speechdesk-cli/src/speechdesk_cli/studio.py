"""Interactive speech studio using prompt_toolkit and rich."""

from __future__ import annotations

from dataclasses import replace

from prompt_toolkit import PromptSession
from rich.console import Console

from .audio import decode_audio, save_audio
from .client import SpeechdeskClient, SpeechdeskError
from .voice_settings import VoiceSettings, VoiceSettingsTracker, pick_default_voice, settings_for_voice

console = Console()

HELP = """[bold]Commands[/bold]
  :voice NAME     select a voice
  :rate X         speaking rate (0.25 - 4.0)
  :pitch X        pitch in semitones (-20 - 20)
  :preview        synthesize a preview of the current voice
  :list           show saved speeches
  :delete ID      delete a saved speech
  :quit           exit
Anything else is synthesized and saved."""


class Studio:
    """Command dispatcher behind the interactive prompt."""

    def __init__(self, client: SpeechdeskClient, voices: list[dict]) -> None:
        self.client = client
        self.voices = {v["name"]: v for v in voices}
        self.tracker = VoiceSettingsTracker(self._announce)
        default = pick_default_voice(voices)
        self.tracker.update(settings_for_voice(default) if default else None)

    def _announce(self, settings: VoiceSettings | None) -> None:
        if settings is None:
            console.print("[yellow]No voice selected; server defaults apply.[/yellow]")
        else:
            console.print(
                f"[dim]Voice: {settings.voice_name} ({settings.language_code}) "
                f"rate={settings.speaking_rate:.2f} pitch={settings.pitch:.2f}[/dim]"
            )

    def handle(self, line: str) -> bool:
        """Run one input line. Returns False when the session should end."""
        line = line.strip()
        if not line:
            return True
        if line in (":quit", ":exit"):
            return False
        if line == ":help":
            console.print(HELP)
            return True

        command, _, arg = line.partition(" ")
        current = self.tracker.current
        try:
            if command == ":voice":
                voice = self.voices.get(arg.strip())
                if voice is None:
                    console.print(f"[red]Unknown voice: {arg.strip()}[/red]")
                    return True
                rate = current.speaking_rate if current else 1.0
                pitch = current.pitch if current else 0.0
                self.tracker.update(settings_for_voice(voice, rate, pitch))
            elif command in (":rate", ":pitch"):
                if current is None:
                    console.print("[red]Select a voice first.[/red]")
                    return True
                field = "speaking_rate" if command == ":rate" else "pitch"
                self.tracker.update(replace(current, **{field: float(arg)}))
            elif command == ":preview":
                if current is None:
                    console.print("[red]Please select a voice for preview.[/red]")
                    return True
                path = save_audio(decode_audio(self.client.preview(current)))
                console.print(f"Preview saved to {path}")
            elif command == ":list":
                for speech in self.client.list_speeches():
                    console.print(f"[bold]{speech['id']}[/bold] {speech['text']} [dim]{speech['created_at']}[/dim]")
            elif command == ":delete":
                self.client.delete_speech(int(arg))
                console.print(f"Deleted speech {int(arg)}")
            else:
                speech = self.client.create_speech(line, current)
                console.print(f"Saved speech {speech['id']}: {speech['audio_url']}")
        except SpeechdeskError as e:
            console.print(f"[red]Error: {e.message}[/red]")
        except ValueError as e:
            console.print(f"[red]Invalid value: {e}[/red]")
        return True


def studio_loop(server_url: str | None = None) -> None:
    """Run the interactive studio until the user quits."""
    session: PromptSession = PromptSession()
    with SpeechdeskClient(server_url=server_url) as client:
        try:
            voices = client.list_voices()
        except SpeechdeskError as e:
            console.print(f"[red]Failed to load voices: {e.message}[/red]")
            voices = []

        console.print("[bold]speechdesk studio[/bold] - type text to synthesize, :help for commands.\n")
        studio = Studio(client, voices)
        while True:
            try:
                line = session.prompt("tts> ")
            except (EOFError, KeyboardInterrupt):
                break
            if not studio.handle(line):
                break
    console.print("[dim]Goodbye![/dim]")
