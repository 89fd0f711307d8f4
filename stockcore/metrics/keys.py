"""Statement types and line-item keys of the yearly financial records."""

from __future__ import annotations

from enum import Enum


class Statement(Enum):
    INCOME = "INC"
    BALANCE = "BAL"
    CASH_FLOW = "CAS"


# Income statement
REVENUE = "Revenue"
NET_INCOME = "NetIncome"
OPERATING_INCOME = "OperatingIncome"
GROSS_PROFIT = "GrossProfit"
DEPRECIATION_AMORTIZATION = "Depreciation/Amortization"
UNUSUAL_EXPENSE_INCOME = "UnusualExpense(Income)"
OTHER_NET = "OtherNet"
MINORITY_INTEREST = "MinorityInterest"
DILUTED_EPS = "DilutedEPSExcludingExtraOrdItems"
DPS = "DPS-CommonStockPrimaryIssue"
DILUTED_WEIGHTED_SHARES = "DilutedWeightedAverageShares"
NET_INTEREST_NON_OPERATING = "InterestInc(Exp)Net-Non-OpTotal"

# Balance sheet
GOODWILL = "GoodwillNet"
INTANGIBLES = "IntangiblesNet"
TOTAL_DEBT = "TotalDebt"
TOTAL_EQUITY = "TotalEquity"
TANGIBLE_BVPS = "TangibleBookValueperShareCommonEq"
TOTAL_ASSETS = "TotalAssets"
COMMON_SHARES = "TotalCommonSharesOutstanding"
LONG_TERM_INVESTMENTS = "LongTermInvestments"
ACCRUED_EXPENSES = "AccruedExpenses"
OTHER_CURRENT_LIABILITIES = "OtherCurrentliabilitiesTotal"
OTHER_LIABILITIES = "OtherLiabilitiesTotal"
TOTAL_INVENTORY = "TotalInventory"
CASH_AND_ST_INVESTMENTS = "CashandShortTermInvestments"
TOTAL_CURRENT_ASSETS = "TotalCurrentAssets"
TOTAL_CURRENT_LIABILITIES = "TotalCurrentLiabilities"

# Cash flow statement (D&A shares its key with the income statement)
CASH_FROM_OPERATIONS = "CashfromOperatingActivities"
CAPITAL_EXPENDITURES = "CapitalExpenditures"
NET_CHANGE_IN_CASH = "NetChangeinCash"
CHANGES_IN_WORKING_CAPITAL = "ChangesinWorkingCapital"
NON_CASH_ITEMS = "Non-CashItems"
DEBT_ISSUED_RETIRED = "Issuance(Retirement)ofDebtNet"
DIVIDENDS_PAID = "TotalCashDividendsPaid"
FX_EFFECTS = "ForeignExchangeEffects"
CASH_INTEREST_PAID = "CashInterestPaid"
CASH_FROM_FINANCING = "CashfromFinancingActivities"
