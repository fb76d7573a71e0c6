"""Static option tables offered by select-type fields.

Tables are ordered tuples so they can be extended without touching the
classification cascade.
"""

from __future__ import annotations

NAME_PREFIX_OPTIONS: tuple[str, ...] = (
    "นาย",
    "นาง",
    "นางสาว",
    "ด.ช.",
    "ด.ญ.",
    "เด็กชาย",
    "เด็กหญิง",
    "Mr.",
    "Mrs.",
    "Ms.",
    "Miss",
)

PROVINCE_OPTIONS: tuple[str, ...] = (
    "กรุงเทพมหานคร",
    "กระบี่",
    "กาญจนบุรี",
    "กาฬสินธุ์",
    "กำแพงเพชร",
    "ขอนแก่น",
    "จันทบุรี",
    "ฉะเชิงเทรา",
    "ชลบุรี",
    "ชัยนาท",
    "ชัยภูมิ",
    "ชุมพร",
    "เชียงราย",
    "เชียงใหม่",
    "ตรัง",
    "ตราด",
    "ตาก",
    "นครนายก",
    "นครปฐม",
    "นครพนม",
    "นครราชสีมา",
    "นครศรีธรรมราช",
    "นครสวรรค์",
    "นนทบุรี",
    "นราธิวาส",
    "น่าน",
    "บึงกาฬ",
    "บุรีรัมย์",
    "ปทุมธานี",
    "ประจวบคีรีขันธ์",
    "ปราจีนบุรี",
    "ปัตตานี",
    "พระนครศรีอยุธยา",
    "พะเยา",
    "พังงา",
    "พัทลุง",
    "พิจิตร",
    "พิษณุโลก",
    "เพชรบุรี",
    "เพชรบูรณ์",
    "แพร่",
    "ภูเก็ต",
    "มหาสารคาม",
    "มุกดาหาร",
    "แม่ฮ่องสอน",
    "ยโสธร",
    "ยะลา",
    "ร้อยเอ็ด",
    "ระนอง",
    "ระยอง",
    "ราชบุรี",
    "ลพบุรี",
    "ลำปาง",
    "ลำพูน",
    "เลย",
    "ศรีสะเกษ",
    "สกลนคร",
    "สงขลา",
    "สตูล",
    "สมุทรปราการ",
    "สมุทรสงคราม",
    "สมุทรสาคร",
    "สระแก้ว",
    "สระบุรี",
    "สิงห์บุรี",
    "สุโขทัย",
    "สุพรรณบุรี",
    "สุราษฎร์ธานี",
    "สุรินทร์",
    "หนองคาย",
    "หนองบัวลำภู",
    "อ่างทอง",
    "อำนาจเจริญ",
    "อุดรธานี",
    "อุตรดิตถ์",
    "อุทัยธานี",
    "อุบลราชธานี",
)

WEEKDAY_OPTIONS: tuple[str, ...] = (
    "วันจันทร์",
    "วันอังคาร",
    "วันพุธ",
    "วันพฤหัสบดี",
    "วันศุกร์",
    "วันเสาร์",
    "วันอาทิตย์",
)

ZODIAC_OPTIONS: tuple[str, ...] = (
    "ชวด (หนู)",
    "ฉลู (วัว)",
    "ขาล (เสือ)",
    "เถาะ (กระต่าย)",
    "มะโรง (งูใหญ่)",
    "มะเส็ง (งูเล็ก)",
    "มะเมีย (ม้า)",
    "มะแม (แพะ)",
    "วอก (ลิง)",
    "ระกา (ไก่)",
    "จอ (หมา)",
    "กุน (หมู)",
)

LUNAR_MONTH_OPTIONS: tuple[str, ...] = (
    "เดือนอ้าย",
    "เดือนยี่",
    "เดือนสาม",
    "เดือนสี่",
    "เดือนห้า",
    "เดือนหก",
    "เดือนเจ็ด",
    "เดือนแปด",
    "เดือนเก้า",
    "เดือนสิบ",
    "เดือนสิบเอ็ด",
    "เดือนสิบสอง",
)

COUNTRY_OPTIONS: tuple[str, ...] = (
    "ไทย",
    "Thailand",
    "ลาว",
    "กัมพูชา",
    "เวียดนาม",
    "เมียนมา",
    "มาเลเซีย",
    "สิงคโปร์",
    "อินโดนีเซีย",
    "ฟิลิปปินส์",
    "จีน",
    "ญี่ปุ่น",
    "เกาหลีใต้",
    "อินเดีย",
    "สหรัฐอเมริกา",
    "อังกฤษ",
    "ฝรั่งเศส",
    "เยอรมนี",
    "ออสเตรเลีย",
    "อื่นๆ",
)

SEX_OPTIONS: tuple[str, ...] = ("ชาย", "หญิง")

# Referenced by name from the default rule tables (``options_ref``).
OPTION_TABLES: dict[str, tuple[str, ...]] = {
    "name_prefix": NAME_PREFIX_OPTIONS,
    "province": PROVINCE_OPTIONS,
    "weekday": WEEKDAY_OPTIONS,
    "zodiac": ZODIAC_OPTIONS,
    "lunar_month": LUNAR_MONTH_OPTIONS,
    "country": COUNTRY_OPTIONS,
    "sex": SEX_OPTIONS,
}
