from __future__ import annotations

import random
from typing import Iterable


DEFAULT_WORDS = [
    "banana", "hotdog", "sausage", "pickle", "melons", "peaches", "eggplant", "donut",
    "taco", "bun", "muffin", "cream", "popsicle", "burrito", "sandwich", "nacho",
    "cookie", "lollipop", "kiss", "bed", "shower", "undies", "bra", "boxer",
    "heels", "lipstick", "selfie", "wink", "bikini", "blush", "pillow", "mirror",
    "perfume", "handcuffs", "blanket", "candle", "chocolate", "whip", "massage", "belly",
    "tongue", "beard", "eyebrow", "icecube", "lotion", "towel", "pajamas", "diary",
    "poop", "fart", "toilet", "underwear", "hairbrush", "sneeze", "pussycat", "rooster",
    "monkey", "donkey", "duck", "cow", "pig", "disco", "wine", "shot",
    "champagne", "cocktail", "straw", "couch", "belt", "tie", "boots", "necklace",
    "sunglasses", "wet", "hot", "sticky", "sweaty", "juicy", "spicy", "rough",
    "smooth", "clown", "slipper", "remote", "balloon", "soap", "bathtub", "rubberduck",
    "bubbles", "steam", "sponge", "naughty", "secret", "spy", "kissmark", "whisper",
    "dare", "truth", "flirt", "filter", "emoji", "hashtag", "like", "meme",
    "honey", "sugar", "candy", "icecream", "milkshake", "date", "rose", "heart",
    "cupid", "valentine", "couple", "hug", "lick", "bite", "chase", "drool",
    "sock", "wig", "sweat", "dance", "twerk", "karaoke", "pizza", "toast",
    "popcorn", "burger", "fries", "onion", "cheese", "potato", "chips", "marshmallow",
    "coffee", "beer", "milk", "fork", "spoon", "knife", "lunchbox", "basket",
    "lipgloss", "bracelet", "watch", "charger", "laptop", "keyboard", "backpack", "wallet",
    "ribbon", "confetti", "cake", "guitar", "drum", "violin", "piano", "microphone",
    "speaker", "heartbeat", "devil", "fire", "moon", "star", "rocket", "alien",
    "mermaid", "unicorn", "dragon", "genie", "witch", "vampire", "ghost", "angel",
    "halo", "seduce", "cuddle", "tickle", "jump", "slide", "spin", "hide",
    "peek", "sneak", "snap", "stretch", "pose", "laugh", "scream", "sleep",
    "dream", "crawl", "run", "fly", "swim", "surf", "float", "dive",
    "twirl", "shake", "bounce", "climb", "fall", "grab", "tug", "poke",
    "tap", "pull", "push", "kick", "punch", "smack", "slap", "sniff",
    "snore", "yawn", "blink", "shiver", "chill", "heat", "splash", "smoke",
    "rain", "thunder", "lightning", "shadow", "glow", "spark", "flame", "cloud",
    "wave", "breeze", "storm", "tornado", "volcano", "earth", "ocean", "island",
    "beach", "cave", "forest", "jungle", "desert", "mountain", "valley", "river",
    "lake", "waterfall", "rope", "chain", "mask", "shorts", "shirt", "jacket",
    "crown", "tattoo", "phone", "camera", "mouse", "chair", "door", "window",
    "curtain", "closet", "key", "lock", "bell", "alarm", "fan", "light",
    "switch", "battery", "scissors", "razor", "toothbrush", "hairdryer", "string", "paper",
    "book", "pen", "pencil", "marker", "note", "card", "coin", "ticket",
    "map", "bag", "bottle", "calendar", "clock", "stage", "moonlight",
]


def pick_words(words: Iterable[str], count: int, rng: random.Random | None = None) -> list[str]:
    """Pick up to ``count`` distinct words, uniformly, without replacement."""
    pool = list(dict.fromkeys(w.strip().lower() for w in words if w and w.strip()))
    count = max(0, min(count, len(pool)))
    return (rng or random).sample(pool, count)


class WordBank:
    def __init__(self, words: Iterable[str] | None = None, rng: random.Random | None = None) -> None:
        self._words = list(dict.fromkeys(w.strip().lower() for w in (words or DEFAULT_WORDS) if w and w.strip()))
        if not self._words:
            raise ValueError("word bank must not be empty")
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.strip().lower() in self._words

    def sample(self, k: int) -> list[str]:
        return pick_words(self._words, k, rng=self._rng)
