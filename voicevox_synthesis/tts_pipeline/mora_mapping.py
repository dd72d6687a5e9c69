"""
モーラ（カタカナ表記）と音素列の対応表

以下のモーラ対応表はOpenJTalkのソースコードから取得し、
カタカナ表記とモーラが一対一対応するように改造した。
ライセンス表記：
-----------------------------------------------------------------
          The Japanese TTS System "Open JTalk"
          developed by HTS Working Group
          http://open-jtalk.sourceforge.net/
-----------------------------------------------------------------

 Copyright (c) 2008-2014  Nagoya Institute of Technology
                          Department of Computer Science

All rights reserved.

Redistribution and use in source and binary forms, with or
without modification, are permitted provided that the following
conditions are met:

- Redistributions of source code must retain the above copyright
  notice, this list of conditions and the following disclaimer.
- Redistributions in binary form must reproduce the above
  copyright notice, this list of conditions and the following
  disclaimer in the documentation and/or other materials provided
  with the distribution.
- Neither the name of the HTS working group nor the names of its
  contributors may be used to endorse or promote products derived
  from this software without specific prior written permission.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND
CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES,
INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF
MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE
DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT OWNER OR CONTRIBUTORS
BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL,
EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED
TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE,
DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON
ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY,
OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY
OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
POSSIBILITY OF SUCH DAMAGE.
"""

from .phoneme import BaseVowel, Consonant

# (子音, 母音, カタカナ) の表。子音無しは空文字列。
# 行は五十音順。1 行に同じ子音のモーラを並べる。
_MORA_TABLE: list[tuple[str, str, str]] = [
    # 母音・撥音・促音
    ("", "a", "ア"), ("", "i", "イ"), ("", "u", "ウ"), ("", "e", "エ"), ("", "o", "オ"),
    ("", "N", "ン"), ("", "cl", "ッ"),
    # カ行
    ("k", "a", "カ"), ("k", "i", "キ"), ("k", "u", "ク"), ("k", "e", "ケ"), ("k", "o", "コ"),
    ("ky", "a", "キャ"), ("ky", "u", "キュ"), ("ky", "e", "キェ"), ("ky", "o", "キョ"),
    ("kw", "a", "クヮ"),
    ("g", "a", "ガ"), ("g", "i", "ギ"), ("g", "u", "グ"), ("g", "e", "ゲ"), ("g", "o", "ゴ"),
    ("gy", "a", "ギャ"), ("gy", "u", "ギュ"), ("gy", "e", "ギェ"), ("gy", "o", "ギョ"),
    ("gw", "a", "グヮ"),
    # サ行
    ("s", "a", "サ"), ("s", "i", "スィ"), ("s", "u", "ス"), ("s", "e", "セ"), ("s", "o", "ソ"),
    ("sh", "a", "シャ"), ("sh", "i", "シ"), ("sh", "u", "シュ"), ("sh", "e", "シェ"), ("sh", "o", "ショ"),
    ("z", "a", "ザ"), ("z", "i", "ズィ"), ("z", "u", "ズ"), ("z", "e", "ゼ"), ("z", "o", "ゾ"),
    ("j", "a", "ジャ"), ("j", "i", "ジ"), ("j", "u", "ジュ"), ("j", "e", "ジェ"), ("j", "o", "ジョ"),
    # タ行
    ("t", "a", "タ"), ("t", "i", "ティ"), ("t", "u", "トゥ"), ("t", "e", "テ"), ("t", "o", "ト"),
    ("ty", "a", "テャ"), ("ty", "u", "テュ"), ("ty", "o", "テョ"),
    ("ch", "a", "チャ"), ("ch", "i", "チ"), ("ch", "u", "チュ"), ("ch", "e", "チェ"), ("ch", "o", "チョ"),
    ("ts", "a", "ツァ"), ("ts", "i", "ツィ"), ("ts", "u", "ツ"), ("ts", "e", "ツェ"), ("ts", "o", "ツォ"),
    ("d", "a", "ダ"), ("d", "i", "ディ"), ("d", "u", "ドゥ"), ("d", "e", "デ"), ("d", "o", "ド"),
    ("dy", "a", "デャ"), ("dy", "u", "デュ"), ("dy", "e", "デェ"), ("dy", "o", "デョ"),
    # ナ行
    ("n", "a", "ナ"), ("n", "i", "ニ"), ("n", "u", "ヌ"), ("n", "e", "ネ"), ("n", "o", "ノ"),
    ("ny", "a", "ニャ"), ("ny", "u", "ニュ"), ("ny", "e", "ニェ"), ("ny", "o", "ニョ"),
    # ハ行
    ("h", "a", "ハ"), ("h", "i", "ヒ"), ("h", "e", "ヘ"), ("h", "o", "ホ"),
    ("hy", "a", "ヒャ"), ("hy", "u", "ヒュ"), ("hy", "e", "ヒェ"), ("hy", "o", "ヒョ"),
    ("f", "a", "ファ"), ("f", "i", "フィ"), ("f", "u", "フ"), ("f", "e", "フェ"), ("f", "o", "フォ"),
    ("b", "a", "バ"), ("b", "i", "ビ"), ("b", "u", "ブ"), ("b", "e", "ベ"), ("b", "o", "ボ"),
    ("by", "a", "ビャ"), ("by", "u", "ビュ"), ("by", "e", "ビェ"), ("by", "o", "ビョ"),
    ("p", "a", "パ"), ("p", "i", "ピ"), ("p", "u", "プ"), ("p", "e", "ペ"), ("p", "o", "ポ"),
    ("py", "a", "ピャ"), ("py", "u", "ピュ"), ("py", "e", "ピェ"), ("py", "o", "ピョ"),
    ("v", "a", "ヴァ"), ("v", "i", "ヴィ"), ("v", "u", "ヴ"), ("v", "e", "ヴェ"), ("v", "o", "ヴォ"),
    # マ行
    ("m", "a", "マ"), ("m", "i", "ミ"), ("m", "u", "ム"), ("m", "e", "メ"), ("m", "o", "モ"),
    ("my", "a", "ミャ"), ("my", "u", "ミュ"), ("my", "e", "ミェ"), ("my", "o", "ミョ"),
    # ヤ行
    ("y", "a", "ヤ"), ("y", "u", "ユ"), ("y", "e", "イェ"), ("y", "o", "ヨ"),
    # ラ行
    ("r", "a", "ラ"), ("r", "i", "リ"), ("r", "u", "ル"), ("r", "e", "レ"), ("r", "o", "ロ"),
    ("ry", "a", "リャ"), ("ry", "u", "リュ"), ("ry", "e", "リェ"), ("ry", "o", "リョ"),
    # ワ行
    ("w", "a", "ワ"), ("w", "i", "ウィ"), ("w", "e", "ウェ"), ("w", "o", "ウォ"),
]  # fmt: skip

# 音素列 (子音+母音) -> カタカナ。例: "kya" -> "キャ", "N" -> "ン"
mora_phonemes_to_mora_kana: dict[str, str] = {
    consonant + vowel: kana for consonant, vowel, kana in _MORA_TABLE
}

# カタカナ -> (子音 | None, 母音)。例: "キャ" -> ("ky", "a"), "ア" -> (None, "a")
mora_kana_to_mora_phonemes: dict[str, tuple[Consonant | None, BaseVowel]] = {
    kana: (consonant or None, vowel)  # type: ignore[misc]
    for consonant, vowel, kana in _MORA_TABLE
}
