"""
Target spoken languages: prompts, voices and allowed characters.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LanguageProfile:
    """Everything language-specific the pipeline needs."""

    code: str
    name: str
    accents: str  # letters kept by the script filter beyond \w
    locale: str  # UTF-8 locale for local command-line synthesis
    voice: str
    tone: str
    system_prompt: str
    script_prompt: str  # {source}
    correction_system_prompt: str
    correction_prompt: str  # {script}, {captions}


_CS = LanguageProfile(
    code="cs",
    name="Czech",
    accents="áčďéěíňóřšťúůýžÁČĎÉĚÍŇÓŘŠŤÚŮÝŽ",
    locale="cs_CZ.UTF-8",
    voice="nova",
    tone="Mluv plynulou češtinou, vřelým a nadšeným tónem vypravěče krátkého vzdělávacího videa.",
    system_prompt="Jsi zkušený copywriter, který píše texty pro voice-over videa.",
    script_prompt=(
        "Na základě následujícího studijního materiálu vytvoř krátký, plynulý a poutavý text "
        "v češtině, který bude namluven jako komentář ve videu. Pokryj všechny důležité "
        "informace ze studijního materiálu a piš srozumitelně. DŮLEŽITÉ: Všechna čísla včetně "
        "letopočtů piš slovy (například místo „1989“ napiš „tisíc devět set osmdesát devět“) "
        "a nepoužívej žádné číslice ani řadové tečky (místo „1.“ napiš „první“). Vrať pouze "
        "samotný text bez nadpisů a formátování.\n\n"
        "Studijní materiál:\n{source}\n\n"
        "Text:"
    ),
    correction_system_prompt="Jsi pečlivý korektor titulků.",
    correction_prompt=(
        "Níže je původní text voice-overu a titulky ve formátu SRT, které vznikly automatickým "
        "přepisem jeho namluvené verze. Oprav v titulcích chyby přepisu (překlepy, nesmyslná "
        "nebo špatně slyšená slova) podle původního textu. Čísla titulků ani časové značky "
        "neměň, ponech je přesně tak, jak jsou. Vrať pouze opravené titulky ve stejném formátu "
        "SRT, bez jakéhokoli dalšího komentáře.\n\n"
        "Původní text:\n{script}\n\n"
        "Titulky:\n{captions}"
    ),
)

_EN = LanguageProfile(
    code="en",
    name="English",
    accents="",
    locale="en_US.UTF-8",
    voice="alloy",
    tone="Speak clear, natural English in the warm, upbeat tone of a short educational video narrator.",
    system_prompt="You are an experienced copywriter of voice-over scripts for videos.",
    script_prompt=(
        "Based on the study material below, write a short, fluent and engaging English text "
        "that will be read aloud as the narration of a video. Cover all the important "
        "information from the material and keep it easy to follow. IMPORTANT: write every "
        "number in words, including years (for example \"nineteen eighty-nine\" instead of "
        "\"1989\"), and never use digits or ordinal markers (write \"first\" instead of "
        "\"1.\"). Return only the text itself, without headings or formatting.\n\n"
        "Study material:\n{source}\n\n"
        "Text:"
    ),
    correction_system_prompt="You are a careful subtitle proofreader.",
    correction_prompt=(
        "Below is the original voice-over text and SRT subtitles produced by automatically "
        "transcribing its spoken version. Fix transcription errors in the subtitles (typos, "
        "nonsense words, misheard words) using the original text. Do not change any subtitle "
        "number or time code; keep them exactly as they are. Return only the corrected "
        "subtitles in the same SRT format, with no other commentary.\n\n"
        "Original text:\n{script}\n\n"
        "Subtitles:\n{captions}"
    ),
)

_DE = LanguageProfile(
    code="de",
    name="German",
    accents="äöüßÄÖÜ",
    locale="de_DE.UTF-8",
    voice="onyx",
    tone="Sprich klares, natürliches Deutsch im warmen, begeisterten Ton eines Erzählers für kurze Lernvideos.",
    system_prompt="Du bist ein erfahrener Texter für Voice-over-Skripte.",
    script_prompt=(
        "Erstelle aus dem folgenden Lernmaterial einen kurzen, flüssigen und unterhaltsamen "
        "Sprechertext auf Deutsch, der als Kommentar eines Videos vorgelesen wird. Decke alle "
        "wichtigen Informationen ab und bleibe leicht verständlich. WICHTIG: Schreibe alle "
        "Zahlen, auch Jahreszahlen, in Worten aus (zum Beispiel „neunzehnhundertneunundachtzig“ "
        "statt „1989“) und verwende keine Ziffern oder Ordnungszahlen mit Punkt (schreibe "
        "„erstens“ statt „1.“). Gib nur den Text selbst ohne Überschriften oder Formatierung "
        "zurück.\n\n"
        "Lernmaterial:\n{source}\n\n"
        "Text:"
    ),
    correction_system_prompt="Du bist ein sorgfältiger Untertitel-Korrektor.",
    correction_prompt=(
        "Unten findest du den Originaltext eines Voice-overs und Untertitel im SRT-Format, die "
        "durch automatische Transkription der gesprochenen Fassung entstanden sind. Korrigiere "
        "Transkriptionsfehler (Tippfehler, unsinnige oder falsch verstandene Wörter) anhand des "
        "Originaltexts. Ändere weder die Nummern noch die Zeitstempel der Untertitel. Gib nur "
        "die korrigierten Untertitel im selben SRT-Format zurück, ohne weitere Kommentare.\n\n"
        "Originaltext:\n{script}\n\n"
        "Untertitel:\n{captions}"
    ),
)

LANGUAGES: dict[str, LanguageProfile] = {p.code: p for p in (_CS, _EN, _DE)}
DEFAULT_LANGUAGE = "cs"


def get_language(code: str) -> LanguageProfile:
    """Look up a language profile by its code."""
    try:
        return LANGUAGES[code.lower()]
    except KeyError:
        supported = ", ".join(sorted(LANGUAGES))
        raise ValueError(f"Unsupported language '{code}' (supported: {supported})") from None
