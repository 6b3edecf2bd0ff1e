"""Declarative registry of the tables each gated feature needs.

A feature key listed here requires its table set to exist in the tenant's
target database before the feature can be enabled. Every statement is
guarded (``IF NOT EXISTS``) and additive; nothing here ever drops.
Adding a gated feature means registering a FeatureTableSet, nothing more.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple


@dataclass(frozen=True)
class FeatureTable:
    """One table plus its indexes."""

    name: str
    statements: Tuple[str, ...]


@dataclass(frozen=True)
class FeatureTableSet:
    """Tables a feature requires, in creation order (referenced tables first)."""

    feature_key: str
    tables: Tuple[FeatureTable, ...]

    @property
    def table_names(self) -> Tuple[str, ...]:
        return tuple(table.name for table in self.tables)


class FeatureTableRegistry:
    """Maps feature keys to table sets."""

    def __init__(self, table_sets: Iterable[FeatureTableSet] = ()):
        self._table_sets: Dict[str, FeatureTableSet] = {}
        for table_set in table_sets:
            self.register(table_set)

    def register(self, table_set: FeatureTableSet) -> None:
        if table_set.feature_key in self._table_sets:
            raise ValueError(f"Feature '{table_set.feature_key}' already has a registered table set")
        self._table_sets[table_set.feature_key] = table_set

    def get(self, feature_key: str) -> Optional[FeatureTableSet]:
        return self._table_sets.get(feature_key)

    def requires_tables(self, feature_key: str) -> bool:
        return feature_key in self._table_sets

    @property
    def feature_keys(self) -> Tuple[str, ...]:
        return tuple(self._table_sets)


FUND_MANAGEMENT = FeatureTableSet(
    feature_key="fund_management",
    tables=(
        FeatureTable("FundAccount", (
            """
            CREATE TABLE IF NOT EXISTS "FundAccount" (
                "id" TEXT NOT NULL PRIMARY KEY,
                "tenantId" TEXT NOT NULL,
                "accountName" TEXT NOT NULL,
                "accountNameLocal" TEXT,
                "accountType" TEXT NOT NULL,
                "description" TEXT,
                "currentBalance" DECIMAL(15,2) NOT NULL DEFAULT 0,
                "currency" TEXT NOT NULL DEFAULT 'INR',
                "bankName" TEXT,
                "accountNumber" TEXT,
                "ifscCode" TEXT,
                "upiId" TEXT,
                "isActive" BOOLEAN NOT NULL DEFAULT true,
                "isDefault" BOOLEAN NOT NULL DEFAULT false,
                "createdAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                "updatedAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
            )
            """,
            'CREATE INDEX IF NOT EXISTS "FundAccount_tenantId_idx" ON "FundAccount"("tenantId")',
            'CREATE INDEX IF NOT EXISTS "FundAccount_accountType_idx" ON "FundAccount"("accountType")',
        )),
        FeatureTable("FundDonation", (
            """
            CREATE TABLE IF NOT EXISTS "FundDonation" (
                "id" TEXT NOT NULL PRIMARY KEY,
                "tenantId" TEXT NOT NULL,
                "accountId" TEXT NOT NULL,
                "electionId" TEXT,
                "donorName" TEXT NOT NULL,
                "donorEmail" TEXT,
                "donorPhone" TEXT,
                "donorAddress" TEXT,
                "donorPanNumber" TEXT,
                "isAnonymous" BOOLEAN NOT NULL DEFAULT false,
                "donationType" TEXT NOT NULL,
                "amount" DECIMAL(15,2) NOT NULL,
                "currency" TEXT NOT NULL DEFAULT 'INR',
                "paymentMethod" TEXT,
                "transactionRef" TEXT,
                "receiptNumber" TEXT,
                "receiptUrl" TEXT,
                "purpose" TEXT,
                "remarks" TEXT,
                "status" TEXT NOT NULL DEFAULT 'PENDING',
                "approvedBy" TEXT,
                "approvedAt" TIMESTAMP,
                "donatedAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                "createdAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                "updatedAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT "FundDonation_accountId_fkey" FOREIGN KEY ("accountId")
                    REFERENCES "FundAccount"("id") ON DELETE CASCADE
            )
            """,
            'CREATE INDEX IF NOT EXISTS "FundDonation_tenantId_idx" ON "FundDonation"("tenantId")',
            'CREATE INDEX IF NOT EXISTS "FundDonation_accountId_idx" ON "FundDonation"("accountId")',
            'CREATE INDEX IF NOT EXISTS "FundDonation_status_idx" ON "FundDonation"("status")',
            'CREATE INDEX IF NOT EXISTS "FundDonation_donatedAt_idx" ON "FundDonation"("donatedAt")',
            'CREATE UNIQUE INDEX IF NOT EXISTS "FundDonation_receiptNumber_key" ON "FundDonation"("receiptNumber") '
            'WHERE "receiptNumber" IS NOT NULL',
        )),
        FeatureTable("FundExpense", (
            """
            CREATE TABLE IF NOT EXISTS "FundExpense" (
                "id" TEXT NOT NULL PRIMARY KEY,
                "tenantId" TEXT NOT NULL,
                "accountId" TEXT NOT NULL,
                "electionId" TEXT,
                "expenseCategory" TEXT NOT NULL,
                "description" TEXT NOT NULL,
                "amount" DECIMAL(15,2) NOT NULL,
                "currency" TEXT NOT NULL DEFAULT 'INR',
                "vendorName" TEXT,
                "vendorContact" TEXT,
                "invoiceNumber" TEXT,
                "invoiceUrl" TEXT,
                "paymentMethod" TEXT,
                "paymentRef" TEXT,
                "paidAt" TIMESTAMP,
                "status" TEXT NOT NULL DEFAULT 'PENDING',
                "requestedBy" TEXT,
                "approvedBy" TEXT,
                "approvedAt" TIMESTAMP,
                "rejectionReason" TEXT,
                "attachments" TEXT DEFAULT '[]',
                "remarks" TEXT,
                "expenseDate" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                "createdAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                "updatedAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT "FundExpense_accountId_fkey" FOREIGN KEY ("accountId")
                    REFERENCES "FundAccount"("id") ON DELETE CASCADE
            )
            """,
            'CREATE INDEX IF NOT EXISTS "FundExpense_tenantId_idx" ON "FundExpense"("tenantId")',
            'CREATE INDEX IF NOT EXISTS "FundExpense_accountId_idx" ON "FundExpense"("accountId")',
            'CREATE INDEX IF NOT EXISTS "FundExpense_status_idx" ON "FundExpense"("status")',
            'CREATE INDEX IF NOT EXISTS "FundExpense_expenseCategory_idx" ON "FundExpense"("expenseCategory")',
        )),
        FeatureTable("FundTransaction", (
            """
            CREATE TABLE IF NOT EXISTS "FundTransaction" (
                "id" TEXT NOT NULL PRIMARY KEY,
                "tenantId" TEXT NOT NULL,
                "accountId" TEXT NOT NULL,
                "transactionType" TEXT NOT NULL,
                "amount" DECIMAL(15,2) NOT NULL,
                "balanceAfter" DECIMAL(15,2) NOT NULL,
                "referenceType" TEXT,
                "referenceId" TEXT,
                "description" TEXT NOT NULL,
                "remarks" TEXT,
                "createdBy" TEXT,
                "createdAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT "FundTransaction_accountId_fkey" FOREIGN KEY ("accountId")
                    REFERENCES "FundAccount"("id") ON DELETE CASCADE
            )
            """,
            'CREATE INDEX IF NOT EXISTS "FundTransaction_tenantId_idx" ON "FundTransaction"("tenantId")',
            'CREATE INDEX IF NOT EXISTS "FundTransaction_accountId_idx" ON "FundTransaction"("accountId")',
            'CREATE INDEX IF NOT EXISTS "FundTransaction_transactionType_idx" ON "FundTransaction"("transactionType")',
            'CREATE INDEX IF NOT EXISTS "FundTransaction_createdAt_idx" ON "FundTransaction"("createdAt")',
        )),
    ),
)


INVENTORY_MANAGEMENT = FeatureTableSet(
    feature_key="inventory_management",
    tables=(
        FeatureTable("InventoryCategory", (
            """
            CREATE TABLE IF NOT EXISTS "InventoryCategory" (
                "id" TEXT NOT NULL PRIMARY KEY,
                "tenantId" TEXT NOT NULL,
                "name" TEXT NOT NULL,
                "nameLocal" TEXT,
                "description" TEXT,
                "icon" TEXT,
                "parentId" TEXT,
                "sortOrder" INTEGER NOT NULL DEFAULT 0,
                "isActive" BOOLEAN NOT NULL DEFAULT true,
                "createdAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                "updatedAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT "InventoryCategory_parentId_fkey" FOREIGN KEY ("parentId")
                    REFERENCES "InventoryCategory"("id") ON DELETE SET NULL
            )
            """,
            'CREATE INDEX IF NOT EXISTS "InventoryCategory_tenantId_idx" ON "InventoryCategory"("tenantId")',
            'CREATE INDEX IF NOT EXISTS "InventoryCategory_parentId_idx" ON "InventoryCategory"("parentId")',
        )),
        FeatureTable("InventoryItem", (
            """
            CREATE TABLE IF NOT EXISTS "InventoryItem" (
                "id" TEXT NOT NULL PRIMARY KEY,
                "tenantId" TEXT NOT NULL,
                "categoryId" TEXT NOT NULL,
                "itemCode" TEXT NOT NULL,
                "name" TEXT NOT NULL,
                "nameLocal" TEXT,
                "description" TEXT,
                "quantity" INTEGER NOT NULL DEFAULT 0,
                "unit" TEXT NOT NULL DEFAULT 'pcs',
                "minStockLevel" INTEGER NOT NULL DEFAULT 0,
                "maxStockLevel" INTEGER,
                "reorderLevel" INTEGER,
                "unitCost" DECIMAL(12,2),
                "totalValue" DECIMAL(15,2),
                "currency" TEXT NOT NULL DEFAULT 'INR',
                "location" TEXT,
                "warehouseId" TEXT,
                "serialNumbers" TEXT DEFAULT '[]',
                "batchNumber" TEXT,
                "isVehicle" BOOLEAN NOT NULL DEFAULT false,
                "vehicleNumber" TEXT,
                "vehicleType" TEXT,
                "imageUrl" TEXT,
                "images" TEXT DEFAULT '[]',
                "status" TEXT NOT NULL DEFAULT 'AVAILABLE',
                "notes" TEXT,
                "createdAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                "updatedAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT "InventoryItem_categoryId_fkey" FOREIGN KEY ("categoryId")
                    REFERENCES "InventoryCategory"("id") ON DELETE RESTRICT
            )
            """,
            'CREATE UNIQUE INDEX IF NOT EXISTS "InventoryItem_tenantId_itemCode_key" '
            'ON "InventoryItem"("tenantId", "itemCode")',
            'CREATE INDEX IF NOT EXISTS "InventoryItem_tenantId_idx" ON "InventoryItem"("tenantId")',
            'CREATE INDEX IF NOT EXISTS "InventoryItem_categoryId_idx" ON "InventoryItem"("categoryId")',
            'CREATE INDEX IF NOT EXISTS "InventoryItem_status_idx" ON "InventoryItem"("status")',
        )),
        FeatureTable("InventoryMovement", (
            """
            CREATE TABLE IF NOT EXISTS "InventoryMovement" (
                "id" TEXT NOT NULL PRIMARY KEY,
                "tenantId" TEXT NOT NULL,
                "itemId" TEXT NOT NULL,
                "movementType" TEXT NOT NULL,
                "quantity" INTEGER NOT NULL,
                "previousQuantity" INTEGER NOT NULL,
                "newQuantity" INTEGER NOT NULL,
                "referenceType" TEXT,
                "referenceId" TEXT,
                "reason" TEXT,
                "remarks" TEXT,
                "fromLocation" TEXT,
                "toLocation" TEXT,
                "movedBy" TEXT,
                "movedAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                "createdAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT "InventoryMovement_itemId_fkey" FOREIGN KEY ("itemId")
                    REFERENCES "InventoryItem"("id") ON DELETE CASCADE
            )
            """,
            'CREATE INDEX IF NOT EXISTS "InventoryMovement_tenantId_idx" ON "InventoryMovement"("tenantId")',
            'CREATE INDEX IF NOT EXISTS "InventoryMovement_itemId_idx" ON "InventoryMovement"("itemId")',
            'CREATE INDEX IF NOT EXISTS "InventoryMovement_movementType_idx" ON "InventoryMovement"("movementType")',
            'CREATE INDEX IF NOT EXISTS "InventoryMovement_movedAt_idx" ON "InventoryMovement"("movedAt")',
        )),
        FeatureTable("InventoryAllocation", (
            """
            CREATE TABLE IF NOT EXISTS "InventoryAllocation" (
                "id" TEXT NOT NULL PRIMARY KEY,
                "tenantId" TEXT NOT NULL,
                "itemId" TEXT NOT NULL,
                "eventId" TEXT,
                "electionId" TEXT,
                "quantity" INTEGER NOT NULL,
                "allocatedTo" TEXT,
                "allocatedToName" TEXT,
                "purpose" TEXT,
                "allocatedFrom" TIMESTAMP NOT NULL,
                "allocatedUntil" TIMESTAMP,
                "returnedAt" TIMESTAMP,
                "returnedQuantity" INTEGER,
                "status" TEXT NOT NULL DEFAULT 'allocated',
                "condition" TEXT,
                "remarks" TEXT,
                "createdBy" TEXT,
                "createdAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                "updatedAt" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT "InventoryAllocation_itemId_fkey" FOREIGN KEY ("itemId")
                    REFERENCES "InventoryItem"("id") ON DELETE CASCADE
            )
            """,
            'CREATE INDEX IF NOT EXISTS "InventoryAllocation_tenantId_idx" ON "InventoryAllocation"("tenantId")',
            'CREATE INDEX IF NOT EXISTS "InventoryAllocation_itemId_idx" ON "InventoryAllocation"("itemId")',
            'CREATE INDEX IF NOT EXISTS "InventoryAllocation_eventId_idx" ON "InventoryAllocation"("eventId")',
            'CREATE INDEX IF NOT EXISTS "InventoryAllocation_status_idx" ON "InventoryAllocation"("status")',
        )),
    ),
)


def default_registry() -> FeatureTableRegistry:
    """Registry with every gated feature the platform ships."""
    return FeatureTableRegistry([FUND_MANAGEMENT, INVENTORY_MANAGEMENT])
